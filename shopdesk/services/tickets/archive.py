"""
Ticket Archive Dispatcher
=========================

Best-effort fan-out of a closed ticket's transcript.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

import discord

from shopdesk.core.logger import logger
from .errors import DeliveryFailure, TicketError
from .models import (
    ArchiveReport,
    ArchiveTarget,
    ArchiveTargetKind,
    DeliveryResult,
    TranscriptDocument,
)

if TYPE_CHECKING:
    from .platform import TicketPlatform


def build_archive_targets(
    owner_id: int,
    channel_id: int,
    archive_channel_id: Optional[int],
) -> List[ArchiveTarget]:
    """Destinations in delivery order. The archive channel is omitted when unset."""
    targets = [
        ArchiveTarget(ArchiveTargetKind.OWNER_DM, owner_id),
        ArchiveTarget(ArchiveTargetKind.ORIGIN_CHANNEL, channel_id),
    ]
    if archive_channel_id:
        targets.append(ArchiveTarget(ArchiveTargetKind.ARCHIVE_CHANNEL, archive_channel_id))
    return targets


class ArchiveDispatcher:
    """
    Delivers a transcript to each target exactly once.

    DESIGN:
        Targets are independent: a failure is logged and recorded in the
        report, then the next target is tried. Nothing is retried and
        dispatch() never raises for a delivery failure.
    """

    def __init__(self, platform: "TicketPlatform") -> None:
        self.platform = platform

    async def _deliver(
        self,
        target: ArchiveTarget,
        document: TranscriptDocument,
        embed: Optional[discord.Embed],
    ) -> None:
        if target.kind == ArchiveTargetKind.OWNER_DM:
            await self.platform.send_direct_message(target.target_id, embed=embed, documents=(document,))
        else:
            await self.platform.send_message(target.target_id, embed=embed, documents=(document,))

    @staticmethod
    def _record_failure(report: ArchiveReport, target: ArchiveTarget, error: TicketError) -> None:
        reason = error.detail or error.user_message
        logger.warning("Transcript Delivery Failed", [
            ("Target", target.kind.value),
            ("ID", str(target.target_id)),
            ("Error", reason[:100]),
        ])
        report.results.append(DeliveryResult(target, False, reason))

    async def dispatch(
        self,
        targets: Sequence[ArchiveTarget],
        document: TranscriptDocument,
        embed: Optional[discord.Embed] = None,
    ) -> ArchiveReport:
        report = ArchiveReport()

        for target in targets:
            try:
                await self._deliver(target, document, embed)
            except TicketError as e:
                self._record_failure(report, target, e)
                continue
            except Exception as e:
                self._record_failure(report, target, DeliveryFailure(detail=f"{type(e).__name__}: {e}"))
                continue
            report.results.append(DeliveryResult(target, True))

        logger.tree("Transcript Dispatched", [
            ("File", document.filename),
            ("Delivered", ", ".join(t.kind.value for t in report.delivered) or "None"),
            ("Failed", ", ".join(t.kind.value for t in report.failed) or "None"),
        ], emoji="📜")

        return report


__all__ = [
    "build_archive_targets",
    "ArchiveDispatcher",
]
