"""
Broadcast Service - Room-scoped fan-out of presence notifications.

This service handles delivery of one payload to every member of a roster:
- Sender exclusion and channel-less participant filtering
- One concurrent delivery worker per recipient
- Per-recipient failure isolation (logged and counted, never raised)
- Aggregated dispatch reporting
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from scrumpoker.core.errors import BroadcastError
from scrumpoker.core.models import Participant

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    """Outcome of one fan-out."""

    targets: int = 0
    attempted: int = 0
    delivered: int = 0
    skipped: int = 0
    failed_channels: List[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_channels)

    @property
    def succeeded(self) -> bool:
        """
        True when the orchestration completed: every attempted delivery has
        finished, delivered or failed. Per-recipient failures do not clear it;
        an aborted fan-out raises BroadcastError instead of returning a report.
        """
        return self.attempted == self.delivered + self.failed


class BroadcastService:
    """Delivers payloads to a roster's live channels, best-effort and at most once."""

    def __init__(self, channel_transport):
        """Initialize the broadcast service.

        Args:
            channel_transport: Transport delivering a payload to one channel id
        """
        self.channel_transport = channel_transport

    def select_recipients(self, targets: Iterable[Participant],
                          exclude_channel_id: Optional[str]) -> List[Participant]:
        """Keep targets with a live channel other than the excluded one, one per channel."""
        recipients = []
        seen_channels = set()
        for participant in targets:
            channel_id = participant.channel_id
            if not channel_id or channel_id == exclude_channel_id or channel_id in seen_channels:
                continue
            seen_channels.add(channel_id)
            recipients.append(participant)
        return recipients

    def broadcast(self, targets: Iterable[Participant], exclude_channel_id: Optional[str],
                  payload: Any) -> DispatchReport:
        """
        Deliver a payload to every target except the excluded channel.

        All deliveries are started before any is awaited, and every started
        delivery is awaited before returning.

        Args:
            targets: Roster to notify
            exclude_channel_id: Channel of the sender, never sent its own event
            payload: Message to deliver

        Returns:
            DispatchReport for the fan-out

        Raises:
            BroadcastError: If the fan-out itself could not be started or awaited
        """
        targets = list(targets)
        recipients = self.select_recipients(targets, exclude_channel_id)
        report = DispatchReport(
            targets=len(targets),
            attempted=len(recipients),
            skipped=len(targets) - len(recipients),
        )

        if not recipients:
            logger.debug('No recipients to notify')
            return report

        outcomes: Dict[str, bool] = {}
        workers = []
        fault = None
        try:
            for participant in recipients:
                worker = threading.Thread(
                    target=self._deliver,
                    args=(participant, payload, outcomes),
                    name=f'Delivery-{participant.channel_id}',
                    daemon=True,
                )
                worker.start()
                workers.append(worker)
        except Exception as e:
            logger.error(f'Error starting delivery workers: {e}')
            fault = e
        finally:
            # Started deliveries are never abandoned
            try:
                for worker in workers:
                    worker.join()
            except Exception as e:
                logger.error(f'Error waiting for delivery workers: {e}')
                fault = fault or e

        for participant in recipients[:len(workers)]:
            if outcomes.get(participant.channel_id):
                report.delivered += 1
            else:
                report.failed_channels.append(participant.channel_id)

        if fault is not None:
            report.attempted = len(workers)
            raise BroadcastError(f'Broadcast aborted: {fault}', report) from fault

        logger.info(
            f'Broadcast delivered to {report.delivered}/{report.attempted} channels '
            f'({report.failed} failed, {report.skipped} skipped)'
        )
        return report

    def _deliver(self, participant: Participant, payload: Any, outcomes: Dict[str, bool]) -> None:
        """Worker body: one delivery attempt, failures recorded and swallowed."""
        channel_id = participant.channel_id
        try:
            self.channel_transport.post_to_channel(channel_id, payload)
            outcomes[channel_id] = True
            logger.debug(f'Delivered to {participant.name} on channel {channel_id}')
        except Exception as e:
            outcomes[channel_id] = False
            logger.warning(f'Delivery to {participant.name} on channel {channel_id} failed: {e}')
