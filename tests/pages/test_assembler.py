"""Tests for page assembly."""

from __future__ import annotations

from pathlib import Path

from genpreview.config import PreviewConfig
from genpreview.pages import assemble_pages, project_overview_document
from tests._fixtures.envelope_builder import EnvelopeBuilder

HOME = """
export default function Home() {
  return (
    <main>
      <h1>Welcome to Acme</h1>
      <p>We build delightful tools for modern teams.</p>
    </main>
  );
}
"""

ABOUT = "export default function About() { return <div><h1>About Us</h1></div> }\n"


def _page(title: str) -> str:
    return f"export default function Page() {{ return <section><h1>{title} page</h1></section> }}\n"


def test_assemble_pages_orders_homepage_first(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write({"app/about/page.tsx": ABOUT, "app/page.tsx": HOME})

    pages = assemble_pages(envelope_builder.project())

    assert [page.slug for page in pages] == ["home", "about"]
    assert [page.order for page in pages] == [0, 1]
    assert [page.title for page in pages] == ["Home", "About"]
    home, about = pages
    assert home.is_homepage is True
    assert about.is_homepage is False
    assert home.meta_title == "Welcome to Acme"
    assert home.description == "We build delightful tools for modern teams."
    assert home.source_path == "app/page.tsx"
    assert about.meta_title == "About Us"
    assert "<title>About | Test Project</title>" in about.html_document


def test_assemble_pages_skips_dynamic_routes(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write(
        {
            "app/page.tsx": "export default function Home() { return <div>Home</div> }",
            "app/blog/[slug]/page.tsx": "export default function BlogPost() { return <div>Post</div> }",
        }
    )

    pages = assemble_pages(envelope_builder.project())

    assert len(pages) == 1
    assert pages[0].is_homepage is True
    assert pages[0].used_fallback is True


def test_assemble_pages_keeps_root_homepage_before_home_folder(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write({"app/home/page.tsx": _page("Home folder"), "app/page.tsx": HOME})

    pages = assemble_pages(envelope_builder.project())

    assert [(page.slug, page.is_homepage, page.source_path) for page in pages] == [
        ("home", True, "app/page.tsx"),
        ("home-page", False, "app/home/page.tsx"),
    ]


def test_assemble_pages_sorts_remaining_pages_by_title(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write(
        {
            "app/zeta/page.tsx": _page("Zeta"),
            "app/alpha/page.tsx": _page("Alpha"),
            "app/Beta/page.tsx": _page("Beta"),
        }
    )

    pages = assemble_pages(envelope_builder.project())

    assert [page.slug for page in pages] == ["alpha", "beta", "zeta"]
    assert [page.order for page in pages] == [0, 1, 2]
    assert not any(page.is_homepage for page in pages)


def test_assemble_pages_returns_empty_list_without_routes(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write({"src/App.tsx": HOME, "README.md": "# Demo\n"})

    assert assemble_pages(envelope_builder.project()) == []


def test_assemble_pages_result_is_independent_of_workers(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write(
        {
            "app/page.tsx": HOME,
            "app/about/page.tsx": ABOUT,
            "app/pricing/page.tsx": _page("Pricing"),
            "app/contact/page.tsx": _page("Contact"),
        }
    )
    project = envelope_builder.project()

    assert assemble_pages(project, workers=4) == assemble_pages(project)


def test_assemble_pages_uses_settings_workers(envelope_builder: EnvelopeBuilder, tmp_path: Path) -> None:
    envelope_builder.write({"app/page.tsx": HOME, "app/about/page.tsx": ABOUT})
    settings = PreviewConfig(root=tmp_path, workers=2)

    pages = assemble_pages(envelope_builder.project(), settings=settings)

    assert [page.slug for page in pages] == ["home", "about"]


def test_assemble_pages_embeds_shared_stylesheet(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write(
        {
            "app/page.tsx": HOME,
            "app/globals.css": "@tailwind base;\n.btn { color: red; }\n",
        }
    )

    (page,) = assemble_pages(envelope_builder.project())

    assert ".btn { color: red; }" in page.html_document
    assert "@tailwind" not in page.html_document


def test_project_overview_document_lists_files(envelope_builder: EnvelopeBuilder) -> None:
    envelope_builder.write({"src/main.py": "print('hi')\n", "README.md": "# Demo\n"})
    envelope_builder.extra = {"setupInstructions": ["pip install -r requirements.txt"]}

    document = project_overview_document(envelope_builder.project())

    assert "<!DOCTYPE html>" in document
    assert "Test Project" in document
    assert document.index("<li>README.md</li>") < document.index("<li>src/main.py</li>")
    assert "pip install -r requirements.txt" in document
