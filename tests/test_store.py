from pathlib import Path

import pytest

from folio.collections import filter_published, sort_by_date
from folio.documents import DocumentType
from folio.errors import ConfigError, ContentLoadError, DuplicatePathError, ParseError, ValidationError
from folio.loader import DefaultDocumentBuilder, FileContentLoader, TypeResolver
from folio.protocols import ContentLoader, DocumentBuilder
from folio.store import ContentStore, load_all, load_config


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def post(title: str, day: str, draft: bool = False, author: str = "Jane Doe") -> str:
    return (
        f"---\ntitle: {title}\ndate: {day}\nauthor: {author}\n"
        f"tags: [travel]\ndraft: {'true' if draft else 'false'}\n---\n\n{title} body.\n"
    )


def create_site(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    write(
        content / "_index.md",
        "---\nbanner:\n  title: Hello\n  button:\n    enable: true\n    label: Read\n    link: /blog/\n---\n",
    )
    write(content / "about" / "_index.md", "---\ntitle: About\n---\nWe write.\n")
    write(content / "privacy.md", "---\ntitle: Privacy Policy\n---\nNo tracking.\n")
    write(content / "authors" / "jane-doe.md", "---\ntitle: Jane Doe\n---\nBio.\n")
    write(content / "blog" / "_index.md", "---\ntitle: Blog\n---\n")
    write(content / "blog" / "post-1.md", post("Post 1", "2024-09-01"))
    write(content / "blog" / "post-2.md", post("Post 2", "2024-09-15", draft=True))
    write(content / "blog" / "post-3.md", post("Post 3", "2024-09-17"))
    write(content / "blog" / "post-4.md", post("Post 4", "2024-09-18"))
    write(content / "blog" / "post-5.md", post("Post 5", "2024-09-19T05:00:00Z"))
    write(content / "blog" / "cover.png", "not content")
    write(content / ".obsidian" / "notes.md", "---\n: broken\n")
    write(content / "_drafts" / "idea.md", "---\nnot closed\n")
    return content


def test_load_all_types_and_order(tmp_path):
    content = create_site(tmp_path)
    documents = load_all(content)
    assert [d.path for d in documents] == [
        "_index",
        "about/_index",
        "authors/jane-doe",
        "blog/_index",
        "blog/post-1",
        "blog/post-2",
        "blog/post-3",
        "blog/post-4",
        "blog/post-5",
        "privacy",
    ]
    types = {d.path: d.type for d in documents}
    assert types["_index"] is DocumentType.SETTINGS
    assert types["about/_index"] is DocumentType.PAGE
    assert types["authors/jane-doe"] is DocumentType.AUTHOR
    assert types["blog/_index"] is DocumentType.PAGE
    assert types["blog/post-1"] is DocumentType.POST
    assert types["privacy"] is DocumentType.PAGE
    assert documents.get("blog/post-1").source == content / "blog" / "post-1.md"


def test_published_posts_scenario(tmp_path):
    content = create_site(tmp_path)
    posts = sort_by_date(filter_published(load_all(content).posts()))
    assert [p.date.strftime("%Y-%m-%d") for p in posts] == [
        "2024-09-19",
        "2024-09-18",
        "2024-09-17",
        "2024-09-01",
    ]
    assert all(not p.draft for p in posts)


def test_load_all_rereads_storage(tmp_path):
    content = create_site(tmp_path)
    store = ContentStore(content)
    first = store.load_all()
    write(content / "blog" / "post-6.md", post("Post 6", "2024-09-20"))
    second = store.load_all()
    assert len(second) == len(first) + 1
    assert second.get("blog/post-6") is not None


def test_errors_are_collected_across_documents(tmp_path):
    content = create_site(tmp_path)
    write(content / "blog" / "broken.md", "---\ntitle: [oops\n---\n")
    write(content / "blog" / "undated.md", "---\ntitle: Undated\nauthor: Jane\n---\n")
    write(content / "blog" / "bad-date.md", "---\ntitle: Bad\nauthor: Jane\ndate: 2024-13-01\n---\n")
    with pytest.raises(ContentLoadError) as excinfo:
        load_all(content)
    errors = excinfo.value.errors
    assert [type(e) for e in errors] == [ValidationError, ParseError, ValidationError]
    assert [e.source_path.name for e in errors] == ["bad-date.md", "broken.md", "undated.md"]
    assert errors[0].key == "date"
    assert errors[2].key == "date"
    assert "broken.md" in str(excinfo.value)



def test_undecodable_file_is_collected_with_the_others(tmp_path):
    content = create_site(tmp_path)
    (content / "blog" / "bad.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")
    with pytest.raises(ContentLoadError) as excinfo:
        load_all(content)
    errors = excinfo.value.errors
    assert len(errors) == 1
    assert isinstance(errors[0], ParseError)
    assert errors[0].source_path.name == "bad.md"
    assert "not valid UTF-8" in errors[0].message

def test_duplicate_paths_abort_the_whole_load(tmp_path):
    content = create_site(tmp_path)
    write(content / "blog" / "post-1.markdown", post("Post 1 again", "2024-09-02"))
    # a malformed document elsewhere does not mask the duplicate
    write(content / "blog" / "broken.md", "---\ntitle: [oops\n---\n")
    with pytest.raises(DuplicatePathError) as excinfo:
        load_all(content)
    assert excinfo.value.path == "blog/post-1"
    assert {p.name for p in excinfo.value.sources} == {"post-1.md", "post-1.markdown"}


def test_iter_documents_is_lazy_and_restartable(tmp_path):
    content = create_site(tmp_path)
    store = ContentStore(content)
    iterator = store.iter_documents()
    assert next(iterator).path == "_index"
    assert [d.path for d in store.iter_documents()] == [d.path for d in store.load_all()]


def test_iter_documents_raises_at_the_failing_document(tmp_path):
    content = create_site(tmp_path)
    write(content / "blog" / "broken.md", "---\ntitle: [oops\n---\n")
    seen = []
    with pytest.raises(ParseError):
        for document in ContentStore(content).iter_documents():
            seen.append(document.path)
    assert seen[-1] == "blog/_index"



def test_iter_documents_names_both_duplicate_sources(tmp_path):
    content = create_site(tmp_path)
    write(content / "blog" / "post-1.markdown", post("Post 1 again", "2024-09-02"))
    with pytest.raises(DuplicatePathError) as excinfo:
        list(ContentStore(content).iter_documents())
    assert [p.name for p in excinfo.value.sources] == ["post-1.markdown", "post-1.md"]

def test_document_type_override(tmp_path):
    content = tmp_path / "content"
    write(content / "team.md", "---\ndocument_type: author\ntitle: The Team\n---\n")
    write(content / "blog" / "notes.md", "---\ndocument_type: page\ntitle: Notes\n---\n")
    documents = load_all(content)
    assert documents.get("team").type is DocumentType.AUTHOR
    assert documents.get("blog/notes").type is DocumentType.PAGE

    write(content / "odd.md", "---\ndocument_type: gallery\ntitle: Odd\n---\n")
    with pytest.raises(ContentLoadError) as excinfo:
        load_all(content)
    assert excinfo.value.errors[0].key == "document_type"


def test_missing_content_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_all(tmp_path / "nope")


def test_type_resolver_rules():
    resolver = TypeResolver()
    assert resolver.resolve(Path("_index.md")) is DocumentType.SETTINGS
    assert resolver.resolve(Path("settings/social.md")) is DocumentType.SETTINGS
    assert resolver.resolve(Path("author.md")) is DocumentType.AUTHOR
    assert resolver.resolve(Path("blog/2024/deep.md")) is DocumentType.POST
    assert resolver.resolve(Path("blog/_index.md")) is DocumentType.PAGE
    assert resolver.resolve(Path("contact.md")) is DocumentType.PAGE

    custom = TypeResolver([("articles/*", DocumentType.POST)])
    assert custom.resolve(Path("articles/a.md")) is DocumentType.POST
    assert custom.resolve(Path("blog/a.md")) is DocumentType.PAGE


def test_default_components_satisfy_protocols(tmp_path):
    assert isinstance(FileContentLoader(tmp_path), ContentLoader)
    assert isinstance(DefaultDocumentBuilder(tmp_path), DocumentBuilder)


def test_store_accepts_custom_loader(tmp_path):
    content = create_site(tmp_path)

    class OnlyPosts:
        def iter_files(self):
            return sorted((content / "blog").glob("post-*.md"))

    documents = ContentStore(content, content_loader=OnlyPosts()).load_all()
    assert len(documents) == 5
    assert all(d.type is DocumentType.POST for d in documents)


def test_load_config_defaults_and_overrides(tmp_path):
    config = load_config(tmp_path)
    assert config["content_dir"] == "content"
    assert config["posts_dir"] == "blog"

    (tmp_path / "folio.yaml").write_text(
        "content_dir: site\n"
        "extensions: [.md]\n"
        "type_rules:\n"
        "  - {pattern: 'articles/*', type: post}\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config["content_dir"] == "site"
    assert config["type_rules"] == [("articles/*", DocumentType.POST)]

    site = tmp_path / "site"
    write(site / "articles" / "a.md", post("A", "2024-01-01"))
    write(site / "articles" / "b.markdown", "ignored")
    documents = ContentStore.from_project(tmp_path).load_all()
    assert [(d.path, d.type) for d in documents] == [("articles/a", DocumentType.POST)]


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "type_rules: nope\n",
        "type_rules:\n  - {pattern: 'x/*'}\n",
        "type_rules:\n  - {pattern: 'x/*', type: gallery}\n",
        "content_dir: [unclosed\n",
        "extensions: .md\n",
        "block_keys: banner\n",
        "extensions: [.md, 3]\n",
        "content_dir: [site]\n",
        "posts_dir: 2024\n",
    ],
)
def test_invalid_config(tmp_path, text):
    (tmp_path / "folio.yaml").write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)
