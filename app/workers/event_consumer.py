"""
Kafka consumer pool for the gateway's event and message-detail topics.

A small pool of consumers shares one group. Records are processed one at a
time per consumer and the offset is committed only after the derived writes
finish (at-least-once). Records that can never be stored are logged with
their raw payload and committed so they cannot block a partition: that is
undecodable payloads (logged by the commands) and writes the store rejects.
A store outage or an unexpected error leaves the offset uncommitted and
rewinds the partition so the record is delivered again after a backoff.

Run with ``python -m app.workers.event_consumer``.
"""

from __future__ import annotations

import asyncio
import signal
import uuid
from typing import Callable, Dict, List, Optional

from aiokafka import AIOKafkaConsumer
from aiokafka.structs import TopicPartition
from prometheus_client import start_http_server

from app.commands.ingest.decoding import raw_text
from app.commands.ingest.ingest_event_command import IngestEventCommand
from app.commands.ingest.ingest_message_detail_command import (
    IngestMessageDetailCommand,
)
from app.config import Settings, get_settings
from app.exceptions import StoreUnavailableError, StoreWriteRejectedError
from app.infra.logging_config import LoggingConfig, get_logger
from app.infra.metrics import RECORDS_COMMITTED, RECORDS_REJECTED, RECORDS_RETRIED
from app.utils.db.db_session_helper import db_session

log = get_logger("event_consumer")

# Seconds to wait before re-reading a partition after a failed record
RETRY_BACKOFF_SECONDS = 5.0
MAX_POLL_RECORDS = 100

RecordHandler = Callable[[bytes], object]


def handle_event(value: bytes):
    with db_session() as db:
        return IngestEventCommand(db).execute(value)


def handle_message_detail(value: bytes):
    with db_session() as db:
        return IngestMessageDetailCommand(db).execute(value)


class EventConsumerPool:
    """Runs ``kafka_consumer_count`` consumers until stopped."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        handlers: Optional[Dict[str, RecordHandler]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.handlers: Dict[str, RecordHandler] = handlers or {
            self.settings.kafka_event_topic: handle_event,
            self.settings.kafka_message_detail_topic: handle_message_detail,
        }
        self._consumers: List[AIOKafkaConsumer] = []
        self._tasks: List[asyncio.Task] = []
        self._stop_requested = False

    def _build_consumer(self, consumer_id: str) -> AIOKafkaConsumer:
        return AIOKafkaConsumer(
            *self.handlers.keys(),
            bootstrap_servers=self.settings.kafka_bootstrap_servers,
            group_id=self.settings.kafka_group_id,
            client_id=consumer_id,
            enable_auto_commit=False,
            auto_offset_reset=self.settings.kafka_auto_offset_reset,
            max_poll_records=MAX_POLL_RECORDS,
        )

    async def start(self) -> None:
        for index in range(self.settings.kafka_consumer_count):
            consumer_id = f"{self.settings.kafka_group_id}-{index}-{uuid.uuid4().hex[:8]}"
            consumer = self._build_consumer(consumer_id)
            await consumer.start()
            self._consumers.append(consumer)
            self._tasks.append(
                asyncio.create_task(self._consume(consumer, consumer_id))
            )
            log.info("Consumer %s started on %s", consumer_id, list(self.handlers))

    async def stop(self) -> None:
        self._stop_requested = True
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        for consumer in self._consumers:
            try:
                await consumer.stop()
            except Exception as e:
                log.warning("Error stopping Kafka consumer: %s", e)
        self._tasks.clear()
        self._consumers.clear()
        log.info("Consumer pool stopped")

    async def run(self) -> None:
        """Start the pool and block until a stop signal arrives."""
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        await self.start()
        try:
            await stop.wait()
        finally:
            await self.stop()

    async def process_record(self, topic: str, value: bytes) -> bool:
        """
        Dispatch one record to its handler in a worker thread.

        Returns:
            bool: True when the offset may be committed
        """
        handler = self.handlers.get(topic)
        if handler is None:
            log.warning("No handler for topic %s; skipping record", topic)
            return True
        try:
            await asyncio.to_thread(handler, value)
        except StoreWriteRejectedError as e:
            log.error(
                "Store rejected record from %s, dropping it: %s. Raw payload: %s",
                topic,
                e,
                raw_text(value),
            )
            RECORDS_REJECTED.labels(topic=topic).inc()
            return True
        except StoreUnavailableError as e:
            log.error("Store unavailable while processing record from %s: %s", topic, e)
            RECORDS_RETRIED.labels(topic=topic, reason="store_unavailable").inc()
            return False
        except Exception:
            log.exception(
                "Unexpected error processing record from %s. Raw payload: %s",
                topic,
                raw_text(value),
            )
            RECORDS_RETRIED.labels(topic=topic, reason="unexpected").inc()
            return False
        return True

    async def _consume(self, consumer: AIOKafkaConsumer, consumer_id: str) -> None:
        while not self._stop_requested:
            try:
                batches = await consumer.getmany(
                    timeout_ms=500, max_records=MAX_POLL_RECORDS
                )
            except Exception:
                log.exception("Consumer %s failed to fetch records", consumer_id)
                await asyncio.sleep(RETRY_BACKOFF_SECONDS)
                continue
            for tp, records in batches.items():
                for record in records:
                    if self._stop_requested:
                        return
                    committed = await self._handle(consumer, tp, record)
                    if not committed:
                        # Skip the rest of this partition's batch; it will be re-read
                        break

    async def _handle(self, consumer: AIOKafkaConsumer, tp: TopicPartition, record) -> bool:
        if record.value is None:
            log.warning("Empty record at %s:%s offset %s", tp.topic, tp.partition, record.offset)
            ok = True
        else:
            ok = await self.process_record(tp.topic, record.value)

        if ok:
            try:
                await consumer.commit({tp: record.offset + 1})
            except Exception:
                log.exception(
                    "Commit failed at %s:%s offset %s", tp.topic, tp.partition, record.offset
                )
            else:
                RECORDS_COMMITTED.labels(topic=tp.topic).inc()
                return True
        else:
            log.warning(
                "Rewinding %s:%s to offset %s for redelivery",
                tp.topic,
                tp.partition,
                record.offset,
            )

        consumer.seek(tp, record.offset)
        await asyncio.sleep(RETRY_BACKOFF_SECONDS)
        return False


def main() -> None:
    LoggingConfig()
    settings = get_settings()
    if not settings.kafka_enabled:
        log.info("Kafka is disabled (KAFKA_ENABLED=false); not starting consumers")
        return
    start_http_server(settings.consumer_metrics_port)
    log.info("Consumer metrics served on port %s", settings.consumer_metrics_port)
    asyncio.run(EventConsumerPool(settings).run())


if __name__ == "__main__":
    main()
