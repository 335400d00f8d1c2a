"""Site configuration.

SiteConfig is a frozen dataclass, immutable after creation and shared
read-only by every render.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(server_path="./site", language_code="fr")

    Directory fields are relative to ``server_path`` unless absolute.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Directories
    server_path: str | Path = "."
    views_dir: str | Path = "views"
    variations_dir: str | Path = "variations"
    controllers_dir: str | Path = "controllers"
    assets_dir: str | Path = "assets"
    generated_dir: str | Path = "serverless"

    # Shared view / variation / controller
    common_view: str | None = None
    common_variation: str | None = None
    common_controller: str | None = None

    # Localization
    language_code: str | None = None

    # Templates
    enable_jinja: bool = False  # Default engine is kida; True selects jinja2
    template_delimiter: str = "%"  # jinja2 block tags: {% ... %}
    autoescape: bool = True
    cache: bool = False

    # URL composition
    http_secure: bool = False
    http_hostname: str = "localhost"
    http_port: int = 80
    url_hostname: str | None = None  # Public hostname (reverse proxy)
    url_port: int | None = None  # Public port (reverse proxy)
    url_relative_sub_path: str = ""

    # Response defaults
    mime_type: str = "text/html"
    charset: str = "utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # Static generation
    html_generation_before_response: bool = False
    html_generation_enable: bool = True

    # CSS injection: True inlines every local <link rel="stylesheet">,
    # a tuple inlines only the listed stylesheets
    inject_css: bool | tuple[str, ...] = False

    # Post-processing
    css_bundles_enable: bool = False
    js_bundles_enable: bool = False
    img_optimizations_enable: bool = False
    stylesheet_bundles: tuple[tuple[str, tuple[str, ...]], ...] = ()
    script_bundles: tuple[tuple[str, tuple[str, ...]], ...] = ()
    image_optimizations: tuple[tuple[str, str], ...] = ()  # (glob, output dir)
    image_quality: int = 85

    # Controller hooks; None waits forever
    hook_timeout: float | None = None

    # -- Derived values --

    @property
    def root(self) -> Path:
        """Absolute site root."""
        return Path(self.server_path).resolve()

    def path(self, *parts: str | Path) -> Path:
        """Resolve *parts* under the site root."""
        return self.root.joinpath(*parts)

    @property
    def url_sub_path(self) -> str:
        """Normalized sub path: ``""`` or ``"/sub"`` (never a trailing slash)."""
        stripped = self.url_relative_sub_path.strip("/")
        return f"/{stripped}" if stripped else ""

    @property
    def url_root(self) -> str:
        """Public site origin, e.g. ``https://www.example.com:8443``.

        The port is omitted when it is the scheme's default.
        """
        scheme = "https" if self.http_secure else "http"
        hostname = self.url_hostname or self.http_hostname
        port = self.url_port or self.http_port
        default_port = 443 if self.http_secure else 80
        if port == default_port:
            return f"{scheme}://{hostname}"
        return f"{scheme}://{hostname}:{port}"

    @property
    def url_base_path(self) -> str:
        """Public origin plus sub path."""
        return self.url_root + self.url_sub_path

    @property
    def content_type(self) -> str:
        """Default ``Content-Type`` header value for rendered pages."""
        return f"{self.mime_type}; charset={self.charset}"
