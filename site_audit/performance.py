# site_audit/performance.py
"""
Performance report artifact produced by the Lighthouse CLI.

Lighthouse attaches to the already running browser through its remote
debugging port and writes an HTML report next to the page's other records.
"""
from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import List

from site_audit.config import AuditConfig
from site_audit.logger import logger
from site_audit.probes.base import FailureKind, ProbeResult


class LighthouseReporter:
    """Runs ``lighthouse <url> --port=<debug_port>`` and keeps the HTML report."""

    def __init__(self, config: AuditConfig) -> None:
        self.config = config

    def command(self, url: str, output_path: Path) -> List[str]:
        return [
            self.config.lighthouse_bin,
            url,
            f"--port={self.config.debug_port}",
            "--output=html",
            f"--output-path={output_path}",
            "--preset=desktop",
            "--quiet",
        ]

    async def generate(self, url: str, output_path: Path) -> ProbeResult:
        if not self.config.lighthouse_enabled:
            return ProbeResult.skip("Lighthouse disabled")
        if shutil.which(self.config.lighthouse_bin) is None:
            return ProbeResult.failed(
                f"Lighthouse CLI not found: {self.config.lighthouse_bin}",
                kind=FailureKind.UNAVAILABLE,
            )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        proc = await asyncio.create_subprocess_exec(
            *self.command(url, output_path),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.config.lighthouse_timeout
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return ProbeResult.failed("Lighthouse audit timed out", kind=FailureKind.TIMEOUT)

        if proc.returncode != 0:
            tail = stderr.decode("utf-8", errors="replace").strip()[-500:]
            return ProbeResult.failed(f"Lighthouse failed: {tail}", kind=FailureKind.UNKNOWN)

        logger.debug("Lighthouse report saved: %s", output_path)
        return ProbeResult.ok({"path": str(output_path)})
