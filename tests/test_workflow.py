"""End-to-end tests for the workflow facade: guard, generation lifecycle, export, copy and clear."""
import asyncio

import httpx
import pytest

from core.personas import BASELINE_PERSONA
from core.schemas import FailureReason, GenerationResult, Notice, SessionPhase
from services import workflow
from services.export_service import DocumentExporter


class GatedClient:
    """Fake generation client whose reply is held until `release` is set."""

    def __init__(self, result):
        self.result = result
        self.release = asyncio.Event()
        self.prompts = []

    async def submit(self, prompt):
        self.prompts.append(prompt)
        await self.release.wait()
        return self.result


class ExplodingClient:
    async def submit(self, prompt):
        raise RuntimeError("unexpected")


class TestGeneration:
    @pytest.mark.asyncio
    async def test_copywriter_scenario(self, session, make_client):
        client, sent = make_client(lambda request: httpx.Response(200, json={"result": "**Bold & Brewed.**"}))
        session.edit_persona("Copywriter")
        session.edit_task("Write a tagline for a coffee shop")

        notice = await workflow.run_generation(session, client)

        assert notice.level == "success"
        assert session.phase is SessionPhase.SUCCEEDED
        assert session.last_result.markdown_text == "**Bold & Brewed.**"
        assert not session.in_flight
        prompt = sent[0]["prompt"]
        assert "COPYWRITER" in prompt
        assert prompt.endswith("Write a tagline for a coffee shop")

    @pytest.mark.asyncio
    async def test_http_500_fails_with_transport_error(self, session, make_client):
        client, _ = make_client(lambda request: httpx.Response(500))
        session.edit_task("anything")
        notice = await workflow.run_generation(session, client)
        assert notice == Notice.error("Connection failed. Please try again.")
        assert session.phase is SessionPhase.FAILED
        assert session.last_result.reason is FailureReason.TRANSPORT_ERROR
        assert session.in_flight is False

    @pytest.mark.asyncio
    async def test_missing_result_field_fails_with_empty_response(self, session, make_client):
        client, _ = make_client(lambda request: httpx.Response(200, json={}))
        session.edit_task("anything")
        notice = await workflow.run_generation(session, client)
        assert notice.message == "Unexpected server response."
        assert session.phase is SessionPhase.FAILED
        assert session.last_result.reason is FailureReason.EMPTY_RESPONSE
        assert not session.in_flight

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "    ", "\n"])
    async def test_blank_task_issues_no_request(self, session, make_client, text):
        client, sent = make_client(lambda request: httpx.Response(200, json={"result": "x"}))
        session.edit_task(text)
        notice = await workflow.run_generation(session, client)
        assert notice.level == "warning"
        assert notice.message == "Please enter a prompt first!"
        assert sent == []
        assert session.phase is SessionPhase.IDLE
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_unexpected_client_exception_still_resets_in_flight(self, session):
        session.edit_task("anything")
        notice = await workflow.run_generation(session, ExplodingClient())
        assert notice.level == "error"
        assert session.phase is SessionPhase.FAILED
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_rejected(self, session):
        client = GatedClient(GenerationResult.success("done"))
        session.edit_task("anything")
        first = asyncio.create_task(workflow.run_generation(session, client))
        await asyncio.sleep(0)

        rejected = await workflow.run_generation(session, client)
        assert rejected.level == "warning"
        assert len(client.prompts) == 1

        client.release.set()
        assert (await first).level == "success"
        assert session.result_text == "done"

    @pytest.mark.asyncio
    async def test_late_reply_after_clear_is_discarded(self, session):
        client = GatedClient(GenerationResult.success("late text"))
        session.edit_persona("Copywriter")
        session.edit_task("anything")
        pending = asyncio.create_task(workflow.run_generation(session, client))
        await asyncio.sleep(0)
        assert session.phase is SessionPhase.GENERATING

        workflow.clear_session(session)
        client.release.set()

        assert await pending is None
        assert session.phase is SessionPhase.IDLE
        assert session.persona == BASELINE_PERSONA
        assert session.task_text == ""
        assert session.last_result is None
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_late_failure_after_clear_is_discarded(self, session):
        client = GatedClient(GenerationResult.failure(FailureReason.TRANSPORT_ERROR))
        session.edit_task("anything")
        pending = asyncio.create_task(workflow.run_generation(session, client))
        await asyncio.sleep(0)
        session.clear()
        client.release.set()
        assert await pending is None
        assert session.phase is SessionPhase.IDLE
        assert session.last_result is None


class TestExportAndCopy:
    @pytest.mark.asyncio
    async def test_export_without_result_warns(self, session):
        notice, artifact = await workflow.run_export(session, DocumentExporter())
        assert notice.level == "warning"
        assert artifact is None

    @pytest.mark.asyncio
    async def test_export_uses_current_persona(self, session):
        session.edit_persona("Backend Developer")
        session.edit_task("API design")
        session.resolve(session.begin_submit(), GenerationResult.success("# API\n\nUse `GET /items`"))

        notice, artifact = await workflow.run_export(session, DocumentExporter())

        assert notice.message == "Document downloaded!"
        assert artifact.filename == "FreelanceFlow_Backend_Developer.docx"

    @pytest.mark.asyncio
    async def test_export_failure_leaves_session_untouched(self, session, monkeypatch):
        from infra.utils import export as export_utils

        session.edit_task("task")
        session.resolve(session.begin_submit(), GenerationResult.success("# Title"))
        before = session.snapshot()

        def broken(_html):
            raise ValueError("bad html")

        monkeypatch.setattr(export_utils, "html_to_docx", broken)
        notice, artifact = await workflow.run_export(session, DocumentExporter())

        assert notice == Notice.error("Failed to export document.")
        assert artifact is None
        assert session.snapshot() == before

    def test_copy_returns_text_verbatim(self, session):
        session.edit_task("task")
        session.resolve(session.begin_submit(), GenerationResult.success("  **keep** me\n"))
        notice, text = workflow.copy_result(session)
        assert text == "  **keep** me\n"
        assert notice.message == "Copied to clipboard"

    def test_copy_without_result_does_nothing(self, session):
        assert workflow.copy_result(session) == (None, None)

    def test_clear_twice_matches_clear_once(self, session):
        session.edit_persona("Translator")
        session.edit_task("task")
        workflow.clear_session(session)
        once = session.snapshot()
        workflow.clear_session(session)
        assert session.snapshot() == once


class TestPromptTemplateFailure:
    @pytest.mark.asyncio
    async def test_missing_template_fails_without_leaving_request_open(self, session, tmp_path, monkeypatch):
        from prompts import manager

        broken = tmp_path / "prompts.yaml"
        broken.write_text("other_key: nothing here\n", encoding="utf-8")
        monkeypatch.setattr(manager, "_prompt_cache", manager.PromptCache(str(broken)))
        client = GatedClient(GenerationResult.success("never used"))
        client.release.set()
        session.edit_task("anything")

        notice = await workflow.run_generation(session, client)

        assert notice.level == "error"
        assert client.prompts == []
        assert not session.in_flight
        assert session.phase is SessionPhase.FAILED
        assert session.last_result.reason is FailureReason.TRANSPORT_ERROR

        # the session accepts a new submission once the template is restored
        monkeypatch.setattr(manager, "_prompt_cache", manager.PromptCache())
        assert (await workflow.run_generation(session, client)).level == "success"
        assert session.result_text == "never used"


class TestExportText:
    @pytest.mark.asyncio
    async def test_export_text_does_not_need_a_session(self):
        notice, artifact = await workflow.export_text("# Notes", "Video Editor", DocumentExporter())
        assert notice.level == "success"
        assert artifact.filename == "FreelanceFlow_Video_Editor.docx"

    @pytest.mark.asyncio
    async def test_export_text_reports_empty_input(self):
        notice, artifact = await workflow.export_text("", "Video Editor", DocumentExporter())
        assert notice == Notice.error("Failed to export document.")
        assert artifact is None
