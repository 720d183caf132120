"""Supervisord Config Renderer: php-fpm and nginx as always-restarted children.

Invariants:
    - supervisord stays in the foreground (it is the container's main process)
    - Each program's stdout/stderr go to the container's stdout/stderr, unrotated
    - autorestart=true for every program
"""

import configparser
import io

from containerboot.config import Settings

PROGRAMS = {
    "php-fpm": "php-fpm --nodaemonize",
    "nginx": "nginx -g 'daemon off;'",
}


def render_supervisord_conf(settings: Settings) -> str:
    parser = configparser.ConfigParser(interpolation=None)
    parser["supervisord"] = {
        "nodaemon": "true",
        "user": "root",
        "logfile": "/dev/stdout",
        "logfile_maxbytes": "0",
        "pidfile": "/var/run/supervisord.pid",
    }
    for name, command in PROGRAMS.items():
        parser[f"program:{name}"] = {
            "command": command,
            "directory": settings.app_dir.as_posix(),
            "stdout_logfile": "/dev/stdout",
            "stdout_logfile_maxbytes": "0",
            "stderr_logfile": "/dev/stderr",
            "stderr_logfile_maxbytes": "0",
            "autorestart": "true",
        }
    buf = io.StringIO()
    parser.write(buf)
    return buf.getvalue()
