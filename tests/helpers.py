from pathlib import Path

FIXTURES = Path(__file__).parent / "fixtures"
POST_FIXTURE = FIXTURES / "2020-05-01_Hello-World-5e1c53a62ef2.html"
COMMENT_FIXTURE = FIXTURES / "draft_Nice-reply-0a1b2c3d4e5f.html"

CDN_IMAGE = "https://cdn-images-1.medium.com/max/800/1*abc.png"


def read_fixture(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def export_page(body: str, title: str = "A title", extra: str = "") -> str:
    """Wrap body markup in the skeleton of a Medium export page."""
    return (
        "<html><head><title>%s</title></head><body><article>"
        '<section data-field="body" class="e-content">%s</section>'
        "<footer>%s</footer></article></body></html>" % (title, body, extra)
    )
