# tests/test_plugin.py
"""
Tests for plugin.py - the md-build hooks driven by a fake host
"""
import asyncio

import pytest

from mdbuild.errors import ConversionError, InputLayoutError, MdBuildError, ParseError
from mdbuild.image_cache import ImageCache
from mdbuild.image_converter import ImageConverter
from mdbuild.plugin import META_ID, MdBuild
from mdbuild.string_utils import unescape_literal

from conftest import SAMPLE_INDEX, FailingEncoder, write_png


@pytest.fixture
def plugin(config, fake_encoder):
    cache = ImageCache(config.cache_path)
    return MdBuild(config, cache=cache, converter=ImageConverter(cache, fake_encoder))


def run_build(plugin, ctx):
    """Drive the hooks the way a host does: start, then end."""
    async def run():
        await plugin.build_start(ctx)
        await plugin.build_end(ctx)
    asyncio.run(run())


class TestResolveId:

    def test_meta_module_path(self, plugin, fake_ctx, config):
        importer = str(config.project_root / "src" / "app.js")
        assert plugin.resolve_id(fake_ctx, "../content/posts/meta.js", importer) == META_ID

    def test_absolute_meta_module_path(self, plugin, fake_ctx, config):
        assert plugin.resolve_id(fake_ctx, str(config.meta_module_path), None) == META_ID

    def test_without_importer_uses_cwd(self, plugin, fake_ctx):
        assert plugin.resolve_id(fake_ctx, "content/posts/meta.js", None) == META_ID

    def test_other_js_file(self, plugin, fake_ctx, config):
        importer = str(config.project_root / "src" / "app.js")
        assert plugin.resolve_id(fake_ctx, "./other.js", importer) is None

    def test_non_js_source(self, plugin, fake_ctx):
        assert plugin.resolve_id(fake_ctx, "content/posts/meta", None) is None

    def test_known_virtual_module(self, plugin, fake_ctx, make_post):
        make_post()
        run_build(plugin, fake_ctx)
        assert plugin.resolve_id(fake_ctx, "hello-world.js", None) == "hello-world.js"

    def test_configured_meta_module(self, fake_ctx, config, fake_encoder):
        config.meta_module = "src/posts.js"
        cache = ImageCache(config.cache_path)
        plugin = MdBuild(config, cache=cache, converter=ImageConverter(cache, fake_encoder))

        assert plugin.resolve_id(fake_ctx, "./posts.js", str(config.project_root / "src" / "main.js")) == META_ID
        assert plugin.resolve_id(fake_ctx, "content/posts/meta.js", None) is None


class TestLoad:

    def test_unknown_id(self, plugin, fake_ctx):
        assert plugin.load(fake_ctx, "/somewhere/else.js") is None

    def test_meta_before_build(self, plugin, fake_ctx):
        assert plugin.load(fake_ctx, META_ID) is None

    def test_meta_reserved_but_not_generated(self, plugin, fake_ctx):
        plugin.registry.reserve(META_ID)
        with pytest.raises(MdBuildError):
            plugin.load(fake_ctx, META_ID)


class TestBuild:

    def test_zero_posts(self, plugin, fake_ctx, config):
        run_build(plugin, fake_ctx)

        assert plugin.load(fake_ctx, META_ID) == "export default [\n];\n"
        assert list(fake_ctx.chunks.values()) == [str(config.meta_module_path)]
        assert fake_ctx.assets == {}

        sitemap = (config.out_path / "sitemap.xml").read_text(encoding="utf-8")
        assert sitemap.count("<url>") == 1
        assert "<loc>https://example.com/</loc>" in sitemap

    def test_single_post(self, plugin, fake_ctx, config, make_post, fake_encoder):
        make_post()
        run_build(plugin, fake_ctx)

        meta = plugin.load(fake_ctx, META_ID)
        assert "title: 'Hello'," in meta
        assert "category: 'Test'," in meta
        assert "author: 'A'," in meta
        assert "date: '2021-01-01'," in meta
        assert "url: '/hello-world'," in meta
        assert "abstract: ''" in meta

        post = plugin.posts[0]
        assert f"html: () => import(import.meta.ROLLUP_FILE_URL_{post.content_ref})" in meta
        assert fake_ctx.chunks[post.content_ref] == "hello-world.js"
        for ref_id in (post.cover_images.avif, post.cover_images.webp, post.cover_images.jpeg):
            assert f"new URL(import.meta.ROLLUP_FILE_URL_{ref_id}, import.meta.url).href" in meta

        content = plugin.load(fake_ctx, "hello-world.js")
        assert content.startswith("export const CONTENT = `")
        assert "<h1>Hello world</h1>" in content

        assert fake_ctx.asset_names() == ["cover.avif", "cover.png", "cover.webp"]
        assert sorted(fake_encoder.calls) == [("cover.png", "avif"), ("cover.png", "webp")]

        sitemap = (config.out_path / "sitemap.xml").read_text(encoding="utf-8")
        assert "<loc>https://example.com/hello-world</loc>" in sitemap

    def test_embedded_images_are_ready_after_build_end(self, plugin, fake_ctx, make_post):
        index = SAMPLE_INDEX + "\n![Figure](figure.png)\n"
        folder = make_post(index=index)
        write_png(folder / "figure.png")

        run_build(plugin, fake_ctx)

        assert "figure.webp" in fake_ctx.asset_names()
        assert all(asset["source"] is not None for asset in fake_ctx.assets.values())
        assert len(plugin.task_queue) == 1

        content = plugin.load(fake_ctx, "hello-world.js")
        assert "<picture>" in content

    def test_abstract_and_escaping(self, plugin, fake_ctx, make_post):
        index = SAMPLE_INDEX.replace('title: "Hello"', "title: \"It's here\"\nabstract: \"Short `summary`\"")
        index += "\nA ${template} and a `tick`\n"
        make_post(index=index)

        run_build(plugin, fake_ctx)

        meta = plugin.load(fake_ctx, META_ID)
        assert "title: 'It\\'s here'," in meta
        assert "abstract: 'Short \\`summary\\`'" in meta

        content = plugin.load(fake_ctx, "hello-world.js")
        body = content[len("export const CONTENT = `"):-len("`;\n")]
        assert "${template}" in unescape_literal(body)
        assert "\\${template}" in body

    def test_two_posts(self, plugin, fake_ctx, make_post):
        for dir_name, title, cover in [("2021-01-01--first", "First", "one.png"), ("2021-02-01--second", "Second", "two.png")]:
            index = SAMPLE_INDEX.replace("\"Hello\"", f"\"{title}\"").replace("cover.png", cover)
            make_post(dir_name, index=index, cover=cover)

        run_build(plugin, fake_ctx)

        assert sorted(post.url for post in plugin.posts) == ["/first", "/second"]
        assert plugin.load(fake_ctx, "first.js") is not None
        assert plugin.load(fake_ctx, "second.js") is not None
        assert len(fake_ctx.chunks) == 3

    def test_directory_date_in_metadata(self, plugin, fake_ctx, make_post):
        make_post("2019-07-04--independence")
        run_build(plugin, fake_ctx)
        assert plugin.posts[0].date == "2019-07-04"
        assert plugin.posts[0].url == "/independence"


class TestBuildErrors:

    def _start(self, plugin, ctx):
        asyncio.run(plugin.build_start(ctx))

    def test_missing_content_root(self, plugin, fake_ctx, config):
        config.content_dir = "does/not/exist"
        plugin.base_path = config.content_path
        with pytest.raises(MdBuildError):
            self._start(plugin, fake_ctx)

    def test_missing_cover(self, plugin, fake_ctx, make_post):
        make_post(cover=None)
        with pytest.raises(InputLayoutError):
            self._start(plugin, fake_ctx)

    def test_missing_front_matter_field(self, plugin, fake_ctx, make_post):
        make_post(index='---\ntitle: "Hello"\n---\nBody\n')
        with pytest.raises(ParseError):
            self._start(plugin, fake_ctx)

    def test_missing_index(self, plugin, fake_ctx, make_post):
        make_post(index=None)
        with pytest.raises(InputLayoutError):
            self._start(plugin, fake_ctx)

    def test_bad_directory_name(self, plugin, fake_ctx, make_post):
        make_post("hello-world")
        with pytest.raises(InputLayoutError):
            self._start(plugin, fake_ctx)

    def test_duplicate_slug(self, plugin, fake_ctx, make_post):
        make_post("2021-01-01--same")
        make_post("2022-01-01--same", index=SAMPLE_INDEX.replace("cover.png", "other.png"), cover="other.png")
        with pytest.raises(MdBuildError):
            self._start(plugin, fake_ctx)

    def test_build_end_with_error_cancels_pending(self, plugin, fake_ctx):
        async def run():
            never = asyncio.get_running_loop().create_future()
            plugin.task_queue.push(never)
            await plugin.build_end(fake_ctx, RuntimeError("bundling failed"))
            return never

        never = asyncio.run(run())
        assert never.cancelled()

    def test_failed_drain_cancels_the_rest(self, plugin, fake_ctx):
        async def run():
            loop = asyncio.get_running_loop()
            failed = loop.create_future()
            failed.set_exception(RuntimeError("encode failed"))
            never = loop.create_future()
            plugin.task_queue.extend([failed, never])
            with pytest.raises(RuntimeError):
                await plugin.build_end(fake_ctx)
            return never

        assert asyncio.run(run()).cancelled()

    def test_failed_image_leaves_no_sitemap(self, config, fake_ctx, make_post):
        folder = make_post(index=SAMPLE_INDEX + "\n![Late](late.png)\n")
        write_png(folder / "late.png")
        cache = ImageCache(config.cache_path)
        plugin = MdBuild(config, cache=cache, converter=ImageConverter(cache, FailingEncoder(["late.png"])))

        async def run():
            await plugin.build_start(fake_ctx)
            sitemap_after_start = (config.out_path / "sitemap.xml").exists()
            with pytest.raises(ConversionError):
                await plugin.build_end(fake_ctx)
            return sitemap_after_start

        assert asyncio.run(run()) is False
        assert not (config.out_path / "sitemap.xml").exists()

    def test_aborted_build_leaves_no_sitemap(self, plugin, fake_ctx, config, make_post):
        make_post()

        async def run():
            await plugin.build_start(fake_ctx)
            await plugin.build_end(fake_ctx, RuntimeError("bundling failed"))

        asyncio.run(run())
        assert not (config.out_path / "sitemap.xml").exists()
