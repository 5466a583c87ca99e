"""User interface assembly for the Gradio front-end."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

import gradio as gr

if TYPE_CHECKING:
    from rucheng_dialect.app.app import RuchengDialectApp

EMPTY_INPUT_MESSAGE = "请输入要搜索的汉字"
EMPTY_INPUT_DISMISS_SECONDS = 3
HOT_SEARCHES = ("汝", "城", "人", "水")
DEFAULT_RESULTS_MESSAGE = "在左侧输入汉字或词语，然后点击 **搜索**。"


def render_stats(app: "RuchengDialectApp") -> str:
    return f"已收录 **{app.total_chars}** 个字词的汝城话发音"


def render_banner(app: "RuchengDialectApp"):
    """Return updates for the banner row and its message."""

    message = app.banner_message
    return gr.update(visible=bool(message)), gr.update(value=message or "")


def dismiss_banner():
    return gr.update(visible=False)


async def run_search(app: "RuchengDialectApp", text: Optional[str]) -> Tuple[str, str]:
    """Search ``text`` and render the results with audio availability."""

    query = (text or "").strip()
    if not query:
        gr.Warning(EMPTY_INPUT_MESSAGE, duration=EMPTY_INPUT_DISMISS_SECONDS)
        return EMPTY_INPUT_MESSAGE, DEFAULT_RESULTS_MESSAGE

    if not app.lifecycle.is_ready:
        app.perform_search(query)
        return "数据尚未加载完成", DEFAULT_RESULTS_MESSAGE

    results = app.perform_search(query)
    audio = await app.probe_results_audio(results)
    status = f"共找到 {len(results)} 条结果"
    return status, app.format_results(query, results, audio)


def create_interface(app: "RuchengDialectApp") -> gr.Blocks:
    """Construct the search form and results panel."""

    async def search_interface(text: str):
        return await run_search(app, text)

    async def initial_view(request: gr.Request):
        character = ""
        if request is not None:
            character = (request.query_params.get("character") or "").strip()

        if character:
            status, results_md = await run_search(app, character)
        else:
            status, results_md = "", DEFAULT_RESULTS_MESSAGE
        banner_row_update, banner_md_update = render_banner(app)
        return (
            banner_row_update,
            banner_md_update,
            render_stats(app),
            character,
            status,
            results_md,
        )

    with gr.Blocks(title="汝城话方言字典", theme=gr.themes.Soft()) as interface:
        with gr.Row(visible=False, elem_id="dataLoadError") as banner_row:
            banner_md = gr.Markdown()
            close_banner_btn = gr.Button("✕", size="sm", scale=0, min_width=40)
        gr.Markdown("<h2>🗣️ 汝城话方言字典</h2>\n<p>查询汉字与词语的汝城话发音。</p>")
        stats_md = gr.Markdown(elem_id="totalChars")

        with gr.Row():
            with gr.Column(scale=1):
                character_input = gr.Textbox(
                    label="汉字或词语",
                    placeholder="例如：汝城",
                    lines=1,
                    elem_id="characterInput",
                )
                search_btn = gr.Button("🔍 搜索", variant="primary")
                gr.Examples(
                    examples=[[char] for char in HOT_SEARCHES],
                    inputs=[character_input],
                    label="热门搜索",
                )

            with gr.Column(scale=2):
                status_md = gr.Markdown()
                results_md = gr.Markdown(value=DEFAULT_RESULTS_MESSAGE)

        search_btn.click(
            fn=search_interface,
            inputs=[character_input],
            outputs=[status_md, results_md],
        )
        character_input.submit(
            fn=search_interface,
            inputs=[character_input],
            outputs=[status_md, results_md],
        )
        close_banner_btn.click(fn=dismiss_banner, inputs=None, outputs=[banner_row])
        interface.load(
            fn=initial_view,
            inputs=None,
            outputs=[banner_row, banner_md, stats_md, character_input, status_md, results_md],
        )

    return interface


__all__ = [
    "DEFAULT_RESULTS_MESSAGE",
    "EMPTY_INPUT_MESSAGE",
    "HOT_SEARCHES",
    "create_interface",
    "dismiss_banner",
    "render_banner",
    "render_stats",
    "run_search",
]
