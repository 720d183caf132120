"""PHP ini Renderer: production opcache tuning and runtime limits.

Invariants:
    - opcache never revalidates timestamps (code is immutable in the image)
    - upload_max_filesize and post_max_size equal the proxy body limit
"""

from containerboot.config import Settings

OPCACHE = {
    "opcache.enable": "1",
    "opcache.memory_consumption": "256",
    "opcache.interned_strings_buffer": "16",
    "opcache.max_accelerated_files": "20000",
    "opcache.validate_timestamps": "0",
    "realpath_cache_size": "4096K",
    "realpath_cache_ttl": "600",
}


def _format(values: dict[str, str]) -> str:
    return "".join(f"{key}={value}\n" for key, value in values.items())


def render_opcache_ini() -> str:
    return _format(OPCACHE)


def render_runtime_ini(settings: Settings) -> str:
    return _format({
        "memory_limit": settings.memory_limit,
        "upload_max_filesize": settings.client_max_body_size,
        "post_max_size": settings.client_max_body_size,
        "max_execution_time": str(settings.max_execution_time),
        "date.timezone": settings.timezone,
    })


def render_php_ini(settings: Settings) -> dict[str, str]:
    """File name -> contents for /usr/local/etc/php/conf.d/."""
    return {
        "opcache.ini": render_opcache_ini(),
        "symfony.ini": render_runtime_ini(settings),
    }
