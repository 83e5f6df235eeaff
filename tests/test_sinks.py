"""Tests for event sinks."""

import json
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from estate_registry.config import KafkaConfig, OutputConfig, RegistryConfig
from estate_registry.exceptions import SinkError
from estate_registry.models import LifecycleEvent, Property, PropertyClass, SaleOffer
from estate_registry.sinks import ConsoleSink, JsonFileSink, create_sinks


@pytest.fixture
def event() -> LifecycleEvent:
    return LifecycleEvent(
        event_id="evt-1",
        event_type="sale.funded",
        logical_time=1050,
        source="estate-registry",
        subject="property/0",
        data={"property_id": 0, "offer_id": 0, "price": Decimal("500")},
        metadata={"caller": "bob"},
    )


@pytest.fixture
def properties() -> list[Property]:
    return [
        Property(
            property_id=i,
            owner="alice",
            property_class=PropertyClass.RESIDENTIAL,
            service_life=100 * i,
            created_at=0,
        )
        for i in range(3)
    ]


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink.max_records is None
        assert sink.events == {}
        assert sink.exports == {}

    def test_publish(self, event: LifecycleEvent, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)

        sink.publish("registry.sale", event)
        captured = capsys.readouterr()

        assert captured.out.startswith("t=1050 [registry.sale] sale.funded property/0 ")
        payload = json.loads(captured.out.split(" ", 4)[4])
        assert payload == {"property_id": 0, "offer_id": 0, "price": "500"}
        assert sink.events["sale.funded"] == 1

    def test_write_batch(self, properties: list[Property], capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=True)

        sink.write_batch("properties", properties)
        captured = capsys.readouterr()

        assert "--- properties: 3 records ---" in captured.out
        assert '"RESIDENTIAL"' in captured.out
        assert sink.exports["properties"] == 3

    def test_write_batch_max_records(self, properties: list[Property], capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False, max_records=1)

        sink.write_batch("properties", properties)
        captured = capsys.readouterr()

        assert "... and 2 more records" in captured.out

    def test_close_summary(self, event: LifecycleEvent, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink()
        sink.publish("registry.sale", event)
        sink.publish("registry.sale", event)
        capsys.readouterr()

        sink.close()
        captured = capsys.readouterr()

        assert "console sink summary" in captured.out
        assert "event sale.funded: 2" in captured.out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "events"

        JsonFileSink(target)

        assert target.is_dir()

    def test_publish_appends_lines(self, tmp_path: Path, event: LifecycleEvent) -> None:
        sink = JsonFileSink(tmp_path)

        sink.publish("registry.sale", event)
        sink.publish("registry.sale", event)

        lines = (tmp_path / "registry_sale.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["subject"] == "property/0"

    def test_write_batch(self, tmp_path: Path, properties: list[Property]) -> None:
        sink = JsonFileSink(tmp_path, pretty=True)

        sink.write_batch("properties", properties)

        data = json.loads((tmp_path / "properties.json").read_text(encoding="utf-8"))
        assert [p["property_id"] for p in data] == [0, 1, 2]
        assert data[0]["state"] == "AVAILABLE"
        assert not list(tmp_path.glob("*.tmp"))
        assert sink._counts["properties"] == 3

    def test_write_failure_raises_sink_error(self, tmp_path: Path, event: LifecycleEvent) -> None:
        sink = JsonFileSink(tmp_path)
        (tmp_path / "registry_sale.jsonl").mkdir()

        with pytest.raises(SinkError):
            sink.publish("registry.sale", event)

    def test_close_summary(self, tmp_path: Path, properties: list[Property], capsys: pytest.CaptureFixture) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("properties", properties)

        sink.close()
        captured = capsys.readouterr()

        assert "properties: 3 records" in captured.out


class TestKafkaSinkMocked:
    """Tests for KafkaSink using mocks (no actual Kafka connection)."""

    def test_producer_stats_success_rate(self) -> None:
        from estate_registry.sinks.kafka import ProducerStats

        assert ProducerStats(sent=10, delivered=9, failed=1).success_rate == 0.9
        assert ProducerStats().success_rate == 0.0

    @patch("estate_registry.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        assert sink.topic_prefix == "registry"
        mock_producer_class.assert_called_once_with(KafkaConfig(bootstrap_servers="kafka:9092").to_dict())

    @patch("estate_registry.sinks.kafka.Producer")
    def test_publish_keys_by_subject(self, mock_producer_class: MagicMock, event: LifecycleEvent) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer
        sink = KafkaSink(KafkaConfig())

        sink.publish("registry.sale", event)

        kwargs = mock_producer.produce.call_args.kwargs
        assert kwargs["topic"] == "registry.sale"
        assert kwargs["key"] == b"property/0"
        assert ("event_type", b"sale.funded") in kwargs["headers"]
        assert ("source", b"estate-registry") in kwargs["headers"]
        assert json.loads(kwargs["value"])["event_id"] == "evt-1"
        assert sink.stats.sent == 1
        mock_producer.poll.assert_called_with(0)

    @patch("estate_registry.sinks.kafka.Producer")
    def test_write_batch_exports_by_id(self, mock_producer_class: MagicMock, properties: list[Property]) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.flush.return_value = 0
        mock_producer_class.return_value = mock_producer
        sink = KafkaSink(KafkaConfig(), topic_prefix="estates")

        sink.write_batch("properties", properties)

        calls = mock_producer.produce.call_args_list
        assert len(calls) == 3
        assert {c.kwargs["topic"] for c in calls} == {"estates.export.properties"}
        assert [c.kwargs["key"] for c in calls] == [b"0", b"1", b"2"]
        mock_producer.flush.assert_called_once_with(30.0)

    def test_offer_key_prefers_offer_id(self) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        offer = SaleOffer(4, 9, "alice", Decimal("1"), 0, 1, 0)

        assert KafkaSink._record_key(offer) == "4"
        assert KafkaSink._record_key({"no": "id"}) is None

    @patch("estate_registry.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        sink = KafkaSink(KafkaConfig())
        msg = MagicMock()
        msg.topic.return_value = "registry.sale"
        msg.partition.return_value = 0
        msg.offset.return_value = 7

        sink._on_delivery(None, msg)
        sink._on_delivery("broker down", msg)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("estate_registry.sinks.kafka.Producer")
    def test_flush_reports_remaining(self, mock_producer_class: MagicMock) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.flush.return_value = 2
        mock_producer_class.return_value = mock_producer
        sink = KafkaSink(KafkaConfig())

        assert sink.flush(timeout=1.0) == 2
        mock_producer.flush.assert_called_once_with(1.0)

    @patch("estate_registry.sinks.kafka.Producer")
    def test_close_flushes(self, mock_producer_class: MagicMock) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.flush.return_value = 0
        mock_producer_class.return_value = mock_producer
        sink = KafkaSink(KafkaConfig())

        sink.close()

        mock_producer.flush.assert_called_once()


class TestCreateSinks:
    """Tests for building sinks from configuration."""

    def test_no_outputs(self) -> None:
        assert create_sinks(RegistryConfig(administrators=frozenset({"root"}))) == []

    def test_console_and_json(self, tmp_path: Path) -> None:
        config = RegistryConfig(
            administrators=frozenset({"root"}),
            output=OutputConfig(events_dir=tmp_path, console=True),
        )

        sinks = create_sinks(config)

        assert [type(s) for s in sinks] == [ConsoleSink, JsonFileSink]

    @patch("estate_registry.sinks.kafka.Producer")
    def test_kafka(self, mock_producer_class: MagicMock) -> None:
        from estate_registry.sinks.kafka import KafkaSink

        config = RegistryConfig(administrators=frozenset({"root"}), kafka=KafkaConfig())

        sinks = create_sinks(config)

        assert len(sinks) == 1
        assert isinstance(sinks[0], KafkaSink)
        assert sinks[0].topic_prefix == "registry"
