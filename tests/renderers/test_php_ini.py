"""PHP ini fragments: opcache tuning and runtime limits."""

from containerboot.config import Settings
from containerboot.renderers.php_ini import render_php_ini


def test_renders_two_fragments():
    assert sorted(render_php_ini(Settings())) == ["opcache.ini", "symfony.ini"]


def test_opcache_never_revalidates():
    opcache = render_php_ini(Settings())["opcache.ini"]
    assert "opcache.enable=1\n" in opcache
    assert "opcache.validate_timestamps=0\n" in opcache
    assert "opcache.max_accelerated_files=20000\n" in opcache


def test_upload_limits_follow_proxy_body_limit():
    ini = render_php_ini(Settings(client_max_body_size="20M"))["symfony.ini"]
    assert "upload_max_filesize=20M\n" in ini
    assert "post_max_size=20M\n" in ini


def test_runtime_defaults():
    ini = render_php_ini(Settings())["symfony.ini"]
    assert "memory_limit=512M\n" in ini
    assert "max_execution_time=300\n" in ini
    assert "date.timezone=Europe/Paris\n" in ini
