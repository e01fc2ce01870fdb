# site_audit/interaction.py
"""
Best-effort page interaction before measurement: scroll to the bottom to
trigger lazy content, type into text fields and press the first button.
"""
from __future__ import annotations

import asyncio

from site_audit.logger import logger

AUTO_SCROLL_SCRIPT = """
async () => {
  await new Promise(resolve => {
    let total = 0;
    const step = 200;
    const timer = setInterval(() => {
      window.scrollBy(0, step);
      total += step;
      if (total >= document.body.scrollHeight) {
        clearInterval(timer);
        resolve();
      }
    }, 100);
  });
}
"""

TEXT_FIELDS = 'input[type="text"], input[type="search"], textarea'
SUBMIT_BUTTONS = 'button, input[type="submit"]'
SAMPLE_TEXT = "Test input text"


async def auto_scroll(page, timeout: float = 30.0) -> None:
    try:
        await asyncio.wait_for(page.evaluate(AUTO_SCROLL_SCRIPT), timeout=timeout)
    except Exception as exc:
        logger.debug("Auto-scroll interrupted: %s", exc)


async def try_input_and_click(page, settle: float = 0.8) -> None:
    try:
        fields = await page.query_selector_all(TEXT_FIELDS)
    except Exception as exc:
        logger.debug("Text field lookup failed: %s", exc)
        fields = []
    for field in fields:
        try:
            await field.focus()
            await page.keyboard.type(SAMPLE_TEXT, delay=40)
        except Exception as exc:
            logger.debug("Typing into field failed: %s", exc)

    try:
        button = await page.query_selector(SUBMIT_BUTTONS)
        if button is not None:
            await button.click()
            await asyncio.sleep(settle)
    except Exception as exc:
        logger.debug("Button click failed: %s", exc)


async def simulate_interaction(page) -> None:
    await auto_scroll(page)
    await try_input_and_click(page)
