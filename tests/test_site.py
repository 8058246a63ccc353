"""Tests for the site builder."""

import dataclasses

import pytest
import yaml

from obsidian_jekyll.config import ConfigurationError, PipelineConfig
from obsidian_jekyll.site import SiteBuilder, build_site


def frontmatter(text):
    return yaml.safe_load(text.split("---\n")[1])


class TestBuildSite:
    """End-to-end builds of a small vault."""

    @pytest.fixture
    def vault(self, make_vault):
        return make_vault({
            "notes/a.md": "---\ntags: [publish]\n---\nSee [[b]] and ![[img.png]]\n",
            "notes/b.md": "---\ntags: [publish]\n---\n# B\n![again](/assets/img.png)\n",
            "notes/deep/c.md": "---\ntags: publish\n---\n# C\n",
            "draft.md": "# Draft\n",
            "assets/img.png": b"\x89PNG",
            "assets/unused.png": b"\x89PNG",
            ".obsidian/app.md": "---\ntags: [publish]\n---\n",
        })

    @pytest.fixture
    def built(self, vault, tmp_path):
        target = tmp_path / "site"
        config = PipelineConfig(source_dir=str(vault), tag_filter={"publish"})
        return target, build_site(config, target)

    def test_published(self, built):
        target, result = built

        assert sorted(result.published) == sorted([
            target / "notes" / "a.md",
            target / "notes" / "b.md",
            target / "notes" / "deep" / "c.md",
        ])
        assert not (target / ".obsidian").exists()

    def test_skipped(self, built, vault):
        _, result = built
        assert result.skipped == [vault / "draft.md"]
        assert result.failures == []

    def test_rendered_note(self, built):
        target, _ = built
        text = (target / "notes" / "a.md").read_text()

        assert text == (
            "---\ntitle: a\nlayout: default\nparent: notes\n---\n"
            "See [b](/notes/b) and ![img.png](/assets/img.png)\n"
        )

    def test_media_copied_once(self, built):
        target, result = built

        assert result.copied_media == [target / "assets" / "img.png"]
        assert (target / "assets" / "img.png").read_bytes() == b"\x89PNG"
        assert not (target / "assets" / "unused.png").exists()

    def test_directory_indexes(self, built):
        target, _ = built

        notes = frontmatter((target / "notes" / "index.md").read_text())
        deep = frontmatter((target / "notes" / "deep" / "index.md").read_text())

        assert notes["title"] == "notes"
        assert notes["has_children"] is True
        assert "parent" not in notes
        assert deep["title"] == "deep"
        assert deep["parent"] == "notes"

    def test_nested_note_ancestors(self, built):
        target, _ = built
        fields = frontmatter((target / "notes" / "deep" / "c.md").read_text())

        assert fields == {"title": "c", "layout": "default", "parent": "deep", "grand_parent": "notes"}

    def test_synthetic_pages(self, built):
        target, _ = built

        not_found = (target / "404.md").read_text()
        assert frontmatter(not_found)["title"] == "404"
        assert not_found.endswith("# Page Not Found\n")
        assert frontmatter((target / "index.md").read_text())["layout"] == "index"


class TestSiteBuilderErrors:
    """Per-note failures never stop the build."""

    def test_unreadable_note(self, make_vault, tmp_path):
        vault = make_vault({
            "good.md": "# Good\n",
            "bad.md": b"\xff\xfe\x00not utf-8",
        })
        config = PipelineConfig(source_dir=str(vault), publish_all=True)

        result = SiteBuilder(config, tmp_path / "site").build()

        assert [f.path for f in result.failures] == [vault / "bad.md"]
        assert [field.name for field in dataclasses.fields(result.failures[0])] == ["path", "error"]
        assert result.published == [tmp_path / "site" / "good.md"]

    def test_existing_index_kept(self, make_vault, tmp_path):
        vault = make_vault({
            "notes/index.md": "# My own index\n",
            "notes/x.md": "# X\n",
        })
        config = PipelineConfig(source_dir=str(vault), publish_all=True)

        build_site(config, tmp_path / "site")

        index = (tmp_path / "site" / "notes" / "index.md").read_text()
        assert index.endswith("# My own index\n")
        assert index.startswith("---\ntitle: index\n")

    def test_missing_source_dir(self, tmp_path):
        config = PipelineConfig(source_dir=str(tmp_path / "missing"))
        with pytest.raises(FileNotFoundError):
            build_site(config, tmp_path / "site")

    def test_source_outside_root_rejected(self, make_vault, tmp_path):
        vault = make_vault({"a.md": "# A\n"})
        with pytest.raises(ConfigurationError):
            build_site(PipelineConfig(source_dir=str(vault), root_dir=str(tmp_path / "other")), tmp_path / "site")

    def test_media_copy_failure_recorded(self, make_vault, tmp_path):
        vault = make_vault({
            "a.md": "![[img.png]]\n",
            "b.md": "# B\n",
            "assets/img.png": b"\x89PNG",
        })
        target = tmp_path / "site"
        target.mkdir()
        # a file where the media directory should go
        (target / "assets").write_text("in the way")
        config = PipelineConfig(source_dir=str(vault), publish_all=True)

        result = build_site(config, target)

        assert [f.path for f in result.failures] == [vault / "assets" / "img.png"]
        assert result.copied_media == []
        assert sorted(result.published) == [target / "a.md", target / "b.md"]
        assert (target / "404.md").exists()
        assert (target / "index.md").exists()
