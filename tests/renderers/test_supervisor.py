"""Supervisord config: two always-restarted programs on the container streams."""

import configparser

from containerboot.config import Settings
from containerboot.renderers.supervisor import render_supervisord_conf


def _parse(text):
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string(text)
    return parser


def test_supervisord_runs_in_foreground():
    conf = _parse(render_supervisord_conf(Settings()))
    assert conf["supervisord"]["nodaemon"] == "true"
    assert conf["supervisord"]["logfile"] == "/dev/stdout"
    assert conf["supervisord"]["logfile_maxbytes"] == "0"


def test_declares_php_fpm_and_nginx():
    conf = _parse(render_supervisord_conf(Settings()))
    programs = [s for s in conf.sections() if s.startswith("program:")]
    assert programs == ["program:php-fpm", "program:nginx"]
    assert conf["program:php-fpm"]["command"] == "php-fpm --nodaemonize"
    assert conf["program:nginx"]["command"] == "nginx -g 'daemon off;'"


def test_programs_restart_and_log_to_container_streams():
    conf = _parse(render_supervisord_conf(Settings()))
    for name in ("program:php-fpm", "program:nginx"):
        section = conf[name]
        assert section["autorestart"] == "true"
        assert section["stdout_logfile"] == "/dev/stdout"
        assert section["stderr_logfile"] == "/dev/stderr"
        assert section["stdout_logfile_maxbytes"] == "0"
        assert section["stderr_logfile_maxbytes"] == "0"
