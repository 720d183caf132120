"""Nginx Site Renderer: reverse-proxy rules for the Symfony front controller.

Invariants:
    - Existing files under document_root are served directly
    - Everything else goes to /index.php, passed to php-fpm over FastCGI
    - The front controller location is internal: a direct /index.php request 404s
    - Any other *.php request returns 404
    - Request bodies capped at client_max_body_size
"""

from string import Template

from containerboot.config import Settings

_SITE = Template("""\
server {
    listen $listen_port;
    server_name _;
    root $document_root;

    location / {
        try_files $$uri /index.php$$is_args$$args;
    }

    location ~ ^/index\\.php(/|$$) {
        fastcgi_pass $fpm_address;
        fastcgi_split_path_info ^(.+\\.php)(/.*)$$;
        include fastcgi_params;
        fastcgi_param SCRIPT_FILENAME $$realpath_root$$fastcgi_script_name;
        fastcgi_param DOCUMENT_ROOT $$realpath_root;
        internal;
    }

    location ~ \\.php$$ {
        return 404;
    }

    client_max_body_size $client_max_body_size;
}
""")


def render_nginx_site(settings: Settings) -> str:
    return _SITE.substitute(
        listen_port=settings.listen_port,
        document_root=settings.document_root.as_posix(),
        fpm_address=settings.fpm_address,
        client_max_body_size=settings.client_max_body_size,
    )
