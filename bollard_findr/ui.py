from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

import gradio as gr
from PIL import Image

from .catalog import CatalogItem
from .config import AppConfig, DEFAULT_DIMENSIONS, FacetDimension
from .image_utils import load_item_image, placeholder_image
from .page import GalleryPage

logger = logging.getLogger(__name__)

GalleryEntry = Tuple[Union[str, Image.Image], str]


def gallery_entries(page: GalleryPage, visible: Optional[List[CatalogItem]] = None) -> List[GalleryEntry]:
    if visible is None:
        visible = page.visible()
    entries = []
    for item in visible:
        try:
            im = load_item_image(item, page.cfg)
        except OSError:
            logger.warning("Could not open image for %s, using placeholder", item.display_label, exc_info=True)
            im = placeholder_image(item.display_label, (page.cfg.thumb_width, page.cfg.thumb_height))
        entries.append((im, item.display_label))
    return entries


def render(page: GalleryPage):
    visible = page.visible()
    return page.status_text(visible), gallery_entries(page, visible), page.counts(visible)


def facet_updates(page: GalleryPage) -> list:
    return [
        gr.CheckboxGroup(
            choices=page.options.get(dim.name, []),
            value=sorted(page.selection.values(dim.name)),
        )
        for dim in page.dimensions
    ]


async def on_page_load(page: GalleryPage):
    await page.load()
    return (page, *render(page), *facet_updates(page))


def _on_facet_change(dimension: str):
    def handler(page: GalleryPage, values):
        page.set_selection(dimension, values)
        return (page, *render(page))
    return handler


def on_clear(page: GalleryPage):
    page.selection.clear()
    return (page, *render(page), *facet_updates(page))


def build_demo(cfg: Optional[AppConfig] = None, dimensions: Optional[Sequence[FacetDimension]] = None) -> gr.Blocks:
    cfg = cfg or AppConfig()
    dimensions = tuple(dimensions if dimensions is not None else DEFAULT_DIMENSIONS)

    with gr.Blocks(title=cfg.title) as demo:
        # gradio copies the initial value for every browser session
        page_state = gr.State(GalleryPage(cfg, dimensions))

        gr.Markdown(f"# {cfg.title}")
        status = gr.Markdown("Loading catalog...")

        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("## Filter")
                groups = [
                    gr.CheckboxGroup(choices=[], value=[], label=dim.heading)
                    for dim in dimensions
                ]
                clear_btn = gr.Button("Clear filters")
            with gr.Column(scale=3):
                gallery = gr.Gallery(label="Bollards", columns=3, object_fit="cover", height="auto")

        with gr.Accordion("Debug", open=False):
            debug = gr.JSON(label="Counts")

        view_outputs = [page_state, status, gallery, debug]

        demo.load(fn=on_page_load, inputs=page_state, outputs=view_outputs + groups)
        for dim, group in zip(dimensions, groups):
            group.change(fn=_on_facet_change(dim.name), inputs=[page_state, group], outputs=view_outputs)
        clear_btn.click(fn=on_clear, inputs=page_state, outputs=view_outputs + groups)

    return demo
