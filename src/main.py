"""
main.py - Demo entry point for the effects runtime
--------------------------------------------------

Responsible for:
- loading configuration and configuring the logger
- building a small annotated document and the service container
- starting the effect engine on the asyncio frame clock
- feeding synthetic pointer movement for a few seconds
- destroying everything and printing the diagnostics summary
"""

import sys

# Set UTF-8 encoding for output BEFORE any output (glyph defaults like ⚛️)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
import math

from effects.engine import EffectEngine, READY_EVENT
from host.asyncio_frame_clock import AsyncioFrameClock
from host.document import Document
from host.element import DomEvent
from managers import ConfigManager
from models.enums import LogCategory
from models.geometry import Rect
from services import ServiceContainer
from services.middleware import log_middleware
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)

DEMO_SECONDS = 3.0


def build_document() -> Document:
    """A page with one element per demo effect"""
    document = Document(capabilities=["webgl"])
    body = document.body
    body.set_rect(Rect(0, 0, 1280, 800))

    cursor = document.create_element("section", wb_component="text-cursor", wb_cursor_spacing="60")
    cursor.set_rect(Rect(0, 0, 1280, 400))
    body.append_child(cursor)

    button = document.create_element("button", wb_component="magnetic-button", wb_strength="3")
    button.text_content = "Hover me"
    button.set_rect(Rect(600, 500, 160, 48))
    body.append_child(button)

    lines = document.create_element("div", wb_component="magnet-lines", wb_rows="4", wb_columns="6")
    lines.set_rect(Rect(100, 450, 300, 200))
    body.append_child(lines)

    title = document.create_element("h1", wb_component="gradient-text", wb_colors="#ff0080, #7928ca")
    title.text_content = "Effects"
    body.append_child(title)

    return document


async def feed_pointer(document: Document, seconds: float) -> int:
    """Sweep a synthetic pointer in a circle; returns the number of moves"""
    moves = 0
    loop = asyncio.get_running_loop()
    started = loop.time()
    while loop.time() - started < seconds:
        t = loop.time() - started
        x = 640 + 400 * math.cos(t * 2)
        y = 400 + 250 * math.sin(t * 3)
        event = DomEvent("pointermove", client_x=x, client_y=y)
        target = document.body
        for element in document.body.iter_descendants():
            if element.get_bounding_client_rect().contains(event.point):
                target = element
        # bubbles up to the document
        target.dispatch_event(event)
        moves += 1
        await asyncio.sleep(1 / 120)
    return moves


async def main():
    # ============================================================
    # 1. CONFIGURATION
    # ============================================================

    config = ConfigManager()
    config.load()
    configure_logger(config.runtime.level, use_colors=config.runtime.use_colors)

    # ============================================================
    # 2. SERVICES
    # ============================================================

    document = build_document()
    clock = AsyncioFrameClock(fps=config.runtime.fps)
    services = ServiceContainer.create(
        document,
        clock,
        event_history_limit=config.runtime.event_history_limit,
        diagnostics_limit=config.runtime.diagnostics_limit,
    )
    services.event_bus.add_middleware(log_middleware)
    document.add_event_listener(READY_EVENT, lambda e: log.info("Runtime ready", **e.detail))

    # ============================================================
    # 3. ENGINE
    # ============================================================

    engine = EffectEngine.from_config(services, config)
    engine.start()

    try:
        moves = await feed_pointer(document, DEMO_SECONDS)
        log.info("Pointer demo finished", moves=moves, frames=clock.frames_emitted)
    finally:
        engine.stop()
        await clock.stop()

    log.info("Diagnostics", **{k.lower(): v for k, v in services.diagnostics.summary().items()})
    log.info("👋 Effects demo shut down cleanly.")


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")


if __name__ == "__main__":
    run()
