from datetime import datetime

from pagewright.content import ContentDocument, Frontmatter, SiteMetadata
from pagewright.pages import BLOG_POST_TEMPLATE, GeneratedPage
from pagewright.templates import TemplateEngine, format_date

SITE = SiteMetadata(
    root_url="https://example.com",
    repo_root_url="https://github.com/org/repo/tree/main",
    title="My Blog",
)


def make_document(tmp_path, body="Hello *there*"):
    source = tmp_path / "content" / "post-a" / "index.mdx"
    source.parent.mkdir(parents=True, exist_ok=True)
    source.write_text(body, encoding="utf-8")
    return ContentDocument(
        id="a",
        file_absolute_path=str(source),
        frontmatter=Frontmatter(
            path="/post-a",
            title="Post A",
            date=datetime(2024, 1, 5),
            description="About A",
        ),
        body=body,
    )


def make_page():
    return GeneratedPage(
        path="/post-a",
        component=BLOG_POST_TEMPLATE,
        context={
            "social_search_url": "https://twitter.com/search?q=https%3A%2F%2Fexample.com%2Fpost-a",
            "source_url": "https://github.com/org/repo/tree/main/content/post-a",
        },
    )


def test_format_date():
    assert format_date(datetime(2024, 1, 5)) == "January 05, 2024"
    assert format_date(None) == ""


def test_blog_post_template_structure(tmp_path):
    engine = TemplateEngine(None, SITE)
    html = engine.render_page(make_page(), make_document(tmp_path))
    assert "<title>Post A | My Blog</title>" in html
    assert '<h1 id="blog-post-title">Post A</h1>' in html
    assert '<a href="/post-a">January 05, 2024</a>' in html
    assert 'class="theme-toggle"' in html
    assert "<em>there</em>" in html
    assert '<a href="/">Back to home</a>' in html
    assert 'href="https://twitter.com/search?q=https%3A%2F%2Fexample.com%2Fpost-a"' in html
    assert 'href="https://github.com/org/repo/tree/main/content/post-a"' in html
    assert 'class="site-header"' in html
    assert "My Blog" in html


def test_project_templates_override_builtin(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "blog-post.html.jinja").write_text(
        "custom {{ frontmatter.title }} {{ page_context.source_url }} {{ content }}",
        encoding="utf-8",
    )
    engine = TemplateEngine(templates, SITE)
    html = engine.render_page(make_page(), make_document(tmp_path))
    assert html.startswith("custom Post A https://github.com/org/repo/tree/main/content/post-a")
    assert "<em>there</em>" in html


def test_title_is_escaped(tmp_path):
    document = make_document(tmp_path)
    document = ContentDocument(
        id=document.id,
        file_absolute_path=document.file_absolute_path,
        frontmatter=Frontmatter(path="/post-a", title="<b>Bold</b>"),
        body=document.body,
    )
    html = TemplateEngine(None, SITE).render_page(make_page(), document)
    assert "&lt;b&gt;Bold&lt;/b&gt;" in html


def test_render_index_lists_posts(tmp_path):
    engine = TemplateEngine(None, SITE)
    html = engine.render_index([make_document(tmp_path)])
    assert '<a href="/post-a">Post A</a>' in html
    assert "January 05, 2024" in html
    assert "About A" in html


def test_url_for_uses_root_url(tmp_path):
    engine = TemplateEngine(None, SITE)
    assert engine._url_for("/") == "https://example.com/"
    assert engine._url_for("http://cdn.com/x.js") == "http://cdn.com/x.js"
    bare = TemplateEngine(None, SiteMetadata())
    assert bare._url_for("posts/") == "/posts/"
