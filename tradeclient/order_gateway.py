"""Sequencing of client requests to the exchange and validation of its responses."""

from __future__ import annotations

import logging
import queue
from collections.abc import Iterator

from .orders import ClientRequest, ClientResponse

logger = logging.getLogger(__name__)


class OrderGateway:
    """Numbers outgoing requests and forwards in-sequence responses for this client."""

    def __init__(
        self, client_id: int, client_requests: queue.Queue, client_responses: queue.Queue
    ) -> None:
        self.client_id = client_id
        self.client_requests = client_requests
        self.client_responses = client_responses
        self.next_outgoing_seq_num = 1
        self.next_exp_seq_num = 1

    def outgoing(self) -> Iterator[tuple[int, ClientRequest]]:
        """Yield every queued request with its sequence number, in order."""
        while True:
            try:
                request = self.client_requests.get_nowait()
            except queue.Empty:
                return
            seq_num = self.next_outgoing_seq_num
            self.next_outgoing_seq_num += 1
            logger.debug("Sending cid:%s seq:%s %s", self.client_id, seq_num, request)
            yield seq_num, request

    def on_response(self, seq_num: int, response: ClientResponse) -> bool:
        """Forward a response if it is for this client and in sequence; report whether it was."""
        logger.debug("Received seq:%s %s", seq_num, response)
        if response.client_id != self.client_id:
            logger.error(
                "Incorrect client id. ClientId expected:%s received:%s.",
                self.client_id,
                response.client_id,
            )
            return False
        if seq_num != self.next_exp_seq_num:
            logger.error(
                "Incorrect sequence number. ClientId:%s. SeqNum expected:%s received:%s.",
                self.client_id,
                self.next_exp_seq_num,
                seq_num,
            )
            return False
        self.next_exp_seq_num += 1
        self.client_responses.put(response)
        return True