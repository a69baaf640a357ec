"""Market data consumption with gap detection and snapshot recovery."""

from __future__ import annotations

import logging
import queue

from sortedcontainers import SortedDict

from .orders import MarketUpdate, MarketUpdateType

logger = logging.getLogger(__name__)

_SNAPSHOT_MARKERS = (MarketUpdateType.SNAPSHOT_START, MarketUpdateType.SNAPSHOT_END)


class MarketDataConsumer:
    """Forwards in-sequence incremental updates and recovers from gaps using snapshots.

    Packets arrive through on_packet as (sequence number, update, stream). While
    the incremental stream is gap free its updates are published directly. On a
    gap the consumer subscribes to the snapshot stream and queues messages from
    both streams until a complete snapshot plus the incrementals following it
    can be published.
    """

    def __init__(self, market_updates: queue.Queue) -> None:
        self.market_updates = market_updates
        self.next_exp_inc_seq_num = 1
        self.in_recovery = False
        self.subscribed_to_snapshot = False
        self.snapshot_queued_msgs: SortedDict = SortedDict()
        self.incremental_queued_msgs: SortedDict = SortedDict()

    def on_packet(self, seq_num: int, update: MarketUpdate, is_snapshot: bool) -> None:
        """Handle one sequenced update from the snapshot or the incremental stream."""
        stream = "snapshot" if is_snapshot else "incremental"
        if is_snapshot and not self.in_recovery:
            logger.warning("Not expecting snapshot messages.")
            return

        logger.debug("Received %s %s => %s", stream, seq_num, update)
        already_in_recovery = self.in_recovery
        self.in_recovery = already_in_recovery or seq_num != self.next_exp_inc_seq_num

        if self.in_recovery:
            if not already_in_recovery:
                logger.info(
                    "Packet drops on %s socket. SeqNum expected:%s received:%s",
                    stream,
                    self.next_exp_inc_seq_num,
                    seq_num,
                )
                self.start_snapshot_sync()
            self._queue_message(is_snapshot, seq_num, update)
        elif not is_snapshot:
            logger.debug("%s", update)
            self.next_exp_inc_seq_num += 1
            self.market_updates.put(update)

    def start_snapshot_sync(self) -> None:
        """Drop anything queued and subscribe to the snapshot stream."""
        self.snapshot_queued_msgs.clear()
        self.incremental_queued_msgs.clear()
        self.subscribed_to_snapshot = True

    def _queue_message(self, is_snapshot: bool, seq_num: int, update: MarketUpdate) -> None:
        if is_snapshot:
            if seq_num in self.snapshot_queued_msgs:
                logger.info("Packet drops on snapshot socket. Received for a 2nd time:%s", update)
                self.snapshot_queued_msgs.clear()
            self.snapshot_queued_msgs[seq_num] = update
        else:
            self.incremental_queued_msgs[seq_num] = update

        logger.debug(
            "size snapshot:%s incremental:%s %s => %s",
            len(self.snapshot_queued_msgs),
            len(self.incremental_queued_msgs),
            seq_num,
            update,
        )
        self.check_snapshot_sync()

    def check_snapshot_sync(self) -> None:
        """Publish the recovered state if the queued messages allow it."""
        snapshots = self.snapshot_queued_msgs
        if not snapshots:
            return

        if snapshots.peekitem(0)[1].type is not MarketUpdateType.SNAPSHOT_START:
            logger.info("Returning because have not seen a SNAPSHOT_START yet.")
            snapshots.clear()
            return

        final_events: list[MarketUpdate] = []
        for expected, (seq_num, update) in enumerate(snapshots.items()):
            if seq_num != expected:
                logger.info(
                    "Detected gap in snapshot stream expected:%s found:%s %s",
                    expected,
                    seq_num,
                    update,
                )
                logger.info("Returning because found gaps in snapshot stream.")
                snapshots.clear()
                return
            if update.type not in _SNAPSHOT_MARKERS:
                final_events.append(update)

        last_snapshot = snapshots.peekitem(-1)[1]
        if last_snapshot.type is not MarketUpdateType.SNAPSHOT_END:
            logger.info("Returning because have not seen a SNAPSHOT_END yet.")
            return

        num_incrementals = 0
        self.next_exp_inc_seq_num = last_snapshot.order_id + 1
        for seq_num, update in self.incremental_queued_msgs.items():
            if seq_num < self.next_exp_inc_seq_num:
                continue
            if seq_num != self.next_exp_inc_seq_num:
                logger.info(
                    "Detected gap in incremental stream expected:%s found:%s %s",
                    self.next_exp_inc_seq_num,
                    seq_num,
                    update,
                )
                logger.info("Returning because have gaps in queued incrementals.")
                snapshots.clear()
                return
            if update.type not in _SNAPSHOT_MARKERS:
                final_events.append(update)
            self.next_exp_inc_seq_num += 1
            num_incrementals += 1

        for update in final_events:
            self.market_updates.put(update)

        logger.info(
            "Recovered %s snapshot and %s incremental orders.",
            len(snapshots) - 2,
            num_incrementals,
        )
        snapshots.clear()
        self.incremental_queued_msgs.clear()
        self.in_recovery = False
        self.subscribed_to_snapshot = False