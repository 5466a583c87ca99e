import asyncio
import json
import warnings

import pytest

gr = pytest.importorskip("gradio")

from rucheng_dialect.app.app import LOAD_ERROR_BANNER, RuchengDialectApp
from rucheng_dialect.app.data.sources import StaticDictionarySource
from rucheng_dialect.app.ui.gradio import (
    DEFAULT_RESULTS_MESSAGE,
    EMPTY_INPUT_MESSAGE,
    dismiss_banner,
    render_banner,
    render_stats,
    run_search,
)


def test_run_search_rejects_empty_input(loaded_app):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        status, results_md = asyncio.run(run_search(loaded_app, "   "))

    assert status == EMPTY_INPUT_MESSAGE
    assert results_md == DEFAULT_RESULTS_MESSAGE


def test_run_search_renders_results(loaded_app):
    status, results_md = asyncio.run(run_search(loaded_app, " 汝 "))

    assert status == "共找到 2 条结果"
    assert "**汝城**" in results_md
    assert "🔊 `ru35.m4a`" in results_md


def test_run_search_before_ready_shows_loading_status():
    app = RuchengDialectApp(source=StaticDictionarySource(json.dumps({"汝": []})))

    status, results_md = asyncio.run(run_search(app, "汝"))

    assert status == "数据尚未加载完成"
    assert results_md == DEFAULT_RESULTS_MESSAGE


def test_render_stats_reports_total_chars(loaded_app, sample_dictionary):
    assert f"**{len(sample_dictionary)}**" in render_stats(loaded_app)


def test_render_banner_visibility(loaded_app):
    row_update, message_update = render_banner(loaded_app)
    assert row_update["visible"] is False
    assert message_update["value"] == ""

    loaded_app.show_data_load_error("offline")

    row_update, message_update = render_banner(loaded_app)
    assert row_update["visible"] is True
    assert message_update["value"] == LOAD_ERROR_BANNER


def test_close_button_hides_banner(loaded_app):
    loaded_app.show_data_load_error("offline")
    assert render_banner(loaded_app)[0]["visible"] is True

    assert dismiss_banner()["visible"] is False


def test_create_interface_builds_blocks(loaded_app):
    interface = loaded_app.create_gradio_interface()

    assert isinstance(interface, gr.Blocks)
