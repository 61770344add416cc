"""Unit tests for the upload orchestrator.

Runs the whole pipeline against FakeYotoAPI with a no-op sleep.
"""

import json
import threading
from unittest.mock import Mock

import pytest

from yotox.core.upload import UploadOrchestrator, upload_to_card
from yotox.domain.enums import PipelineState, UploadStage
from yotox.domain.models import UploadTarget
from yotox.errors import (
    CardFetchError,
    CardSaveError,
    TranscodeTimeoutError,
    UploadCancelledError,
    UploadTargetError,
    UploadTransportError,
)
from yotox.progress import SilentProgressReporter


@pytest.fixture
def orchestrator(transport, no_sleep):
    sleep, _ = no_sleep
    return UploadOrchestrator.from_transport(transport, sleep=sleep)


@pytest.fixture
def progress():
    return SilentProgressReporter(track_events=True)


class TestHappyPath:
    """Every remote call succeeds."""

    def test_returns_single_track_card(self, orchestrator, upload_request, fake_api, progress):
        result = orchestrator.upload(upload_request, on_progress=progress)

        card = result["card"]
        assert len(card["content"]["chapters"]) == 1
        assert len(card["content"]["chapters"][0]["tracks"]) == 1
        track = card["content"]["chapters"][0]["tracks"][0]
        assert track["trackUrl"] == f"yoto:#{fake_api.transcode['transcodedSha256']}"
        assert card["title"] == "New Title"
        assert orchestrator.state == PipelineState.COMPLETE

    def test_track_url_is_not_upload_url(self, orchestrator, upload_request, fake_api):
        result = orchestrator.upload(upload_request)

        track = result["card"]["content"]["chapters"][0]["tracks"][0]
        assert track["trackUrl"] != fake_api.upload_payload["upload"]["uploadUrl"]

    def test_calls_endpoints_in_order(self, orchestrator, upload_request, fake_api):
        orchestrator.upload(upload_request)

        assert [(r.method, r.url.path) for r in fake_api.requests] == [
            ("GET", "/media/transcode/audio/uploadUrl"),
            ("PUT", "/audio/one-time"),
            ("GET", "/media/upload/upload-123/transcoded"),
            ("GET", "/content/card-1"),
            ("POST", "/content"),
        ]

    def test_waypoints(self, orchestrator, upload_request, progress):
        orchestrator.upload(upload_request, on_progress=progress)

        assert [(e.stage, e.progress) for e in progress.events] == [
            (UploadStage.UPLOADING, 0),
            (UploadStage.TRANSCODING, 50),
            (UploadStage.UPDATING_CARD, 85),
            (UploadStage.COMPLETE, 100),
        ]

    def test_waypoints_non_decreasing_with_polling(self, orchestrator, upload_request, fake_api, progress):
        fake_api.ready_after_polls = 5

        orchestrator.upload(upload_request, on_progress=progress)

        values = progress.progress_values
        assert values == sorted(values)
        assert len(values) == 4 + 5
        assert all(50 < v <= 75 for v in values[2:7])
        last = progress.get_latest_event()
        assert last.stage == UploadStage.COMPLETE
        assert last.progress == 100
        assert not any(e.failed for e in progress.events)

    def test_saved_payload_preserves_unrelated_fields(self, orchestrator, upload_request, fake_api):
        orchestrator.upload(upload_request)

        payload = json.loads(fake_api.save_calls[0].content)
        assert payload["customField"] == {"keep": ["me", 1]}
        assert payload["metadata"]["description"] == "A card"
        assert payload["metadata"]["media"]["readableFileSize"] == 1.5


class TestFailures:
    """A failing stage aborts the pipeline."""

    def test_transcode_timeout_never_saves(self, orchestrator, upload_request, fake_api, progress):
        fake_api.ready_after_polls = None

        with pytest.raises(TranscodeTimeoutError):
            orchestrator.upload(upload_request, on_progress=progress)

        assert len(fake_api.save_calls) == 0
        assert len(fake_api.calls("GET", "/content/card-1")) == 0
        assert fake_api.polls == 30
        assert orchestrator.state == PipelineState.FAILED

    def test_save_failure_reports_body_and_keeps_fields(self, orchestrator, upload_request, fake_api, progress):
        fake_api.save_status = 422
        fake_api.save_error_body = "title too long"

        with pytest.raises(CardSaveError) as exc_info:
            orchestrator.upload(upload_request, on_progress=progress)

        assert "title too long" in str(exc_info.value)
        assert exc_info.value.response_text == "title too long"
        payload = json.loads(fake_api.save_calls[0].content)
        assert payload["customField"] == {"keep": ["me", 1]}
        assert payload["content"]["playbackType"] == "linear"

    def test_failure_reported_once(self, orchestrator, upload_request, fake_api, progress):
        fake_api.save_status = 500

        with pytest.raises(CardSaveError):
            orchestrator.upload(upload_request, on_progress=progress)

        failures = [e for e in progress.events if e.failed]
        assert len(failures) == 1
        assert failures[0] is progress.events[-1]
        assert failures[0].stage == UploadStage.UPDATING_CARD
        assert failures[0].progress == 85
        assert "Failed to update card" in failures[0].error
        assert not any(e.stage == UploadStage.COMPLETE for e in progress.events)

    def test_upload_target_failure(self, orchestrator, upload_request, fake_api, progress):
        fake_api.upload_payload = {"upload": {}}

        with pytest.raises(UploadTargetError):
            orchestrator.upload(upload_request, on_progress=progress)

        assert len(fake_api.requests) == 1
        assert len(progress.events) == 1
        assert progress.events[0].failed
        assert progress.events[0].progress == 0

    def test_binary_upload_failure_skips_polling(self, orchestrator, upload_request, fake_api, progress):
        fake_api.put_status = 500

        with pytest.raises(UploadTransportError):
            orchestrator.upload(upload_request, on_progress=progress)

        assert fake_api.polls == 0
        assert progress.events[-1].stage == UploadStage.UPLOADING
        assert progress.events[-1].failed

    def test_card_fetch_failure(self, orchestrator, upload_request, fake_api):
        fake_api.fetch_status = 404

        with pytest.raises(CardFetchError):
            orchestrator.upload(upload_request)

        assert len(fake_api.save_calls) == 0

    def test_no_rollback_after_late_failure(self, orchestrator, upload_request, fake_api):
        fake_api.save_status = 500

        with pytest.raises(CardSaveError):
            orchestrator.upload(upload_request)

        assert all(r.method != "DELETE" for r in fake_api.requests)


class TestCollaborators:
    """Orchestrator wiring with mocked collaborators."""

    def test_mutated_card_is_saved(self, upload_request, transcode_payload, card):
        from yotox.domain.models import TranscodeResult

        initiator = Mock()
        initiator.request_upload_target.return_value = UploadTarget("https://u", "id-9")
        uploader = Mock()
        poller = Mock()
        poller.wait_for_transcode.return_value = TranscodeResult.model_validate(transcode_payload)
        repository = Mock()
        repository.fetch_card.return_value = card
        repository.save_card.side_effect = lambda c: c

        orchestrator = UploadOrchestrator(initiator, uploader, poller, repository)
        result = orchestrator.upload(upload_request)

        uploader.put_audio.assert_called_once_with("https://u", upload_request.audio_file)
        assert poller.wait_for_transcode.call_args[0][0] == "id-9"
        repository.fetch_card.assert_called_once_with("card-1")
        assert result["title"] == "New Title"
        assert card["title"] == "Old Title"

    def test_cancelled_before_start(self, orchestrator, upload_request, fake_api, progress):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(UploadCancelledError):
            orchestrator.upload(upload_request, on_progress=progress, cancel_event=cancel)

        assert fake_api.requests == []
        assert progress.events[-1].failed


class TestUploadToCard:
    """Test the convenience entry point."""

    def test_upload_to_card(self, upload_request, fake_api, progress, no_sleep):
        sleep, delays = no_sleep
        fake_api.ready_after_polls = 2

        result = upload_to_card(
            upload_request,
            on_progress=progress,
            client=fake_api.client(),
            sleep=sleep,
        )

        assert result["card"]["title"] == "New Title"
        assert progress.events[-1].progress == 100
        assert fake_api.requests[0].headers["Authorization"] == "Bearer test-token"
        assert delays == [0.5, 0.5]
