import unittest
from unittest.mock import MagicMock

from models.problem import ProblemInput, ProblemMode
from session.context import SessionState
from session.controller import (
    FOLLOW_UP_FAILED_REPLY,
    SOLVE_FAILED_REPLY,
    SessionController,
    SessionError,
)


class ScriptedClient:
    """Returns canned replies in order and records what it was sent."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.payloads = []
        self.observed_states = []
        self.controller = None

    def invoke(self, payload):
        self.payloads.append(payload)
        if self.controller is not None:
            self.observed_states.append(self.controller.ctx.state)
        return self.replies.pop(0)


class TestSessionController(unittest.TestCase):
    def setUp(self):
        self.client = ScriptedClient("solução", "resposta 1", "resposta 2")
        self.ctrl = SessionController(self.client, mode=ProblemMode.DERIVATIVES)
        self.client.controller = self.ctrl

    def test_submit_stores_solution(self):
        result = self.ctrl.submit_problem(ProblemInput(text="x^2"))

        self.assertEqual(result, "solução")
        self.assertEqual(self.ctrl.solution, "solução")
        self.assertEqual(self.ctrl.ctx.state, SessionState.SOLUTION_READY)
        self.assertEqual(self.client.observed_states, [SessionState.AWAITING_SOLUTION])
        self.assertTrue(self.client.payloads[0].text.endswith("x^2"))

    def test_two_follow_ups_build_four_turns(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.send_follow_up("por quê?")
        self.ctrl.send_follow_up("e depois?")

        self.assertEqual(
            [t.role for t in self.ctrl.turns], ["user", "model", "user", "model"]
        )
        self.assertEqual(
            [t.content for t in self.ctrl.turns],
            ["por quê?", "resposta 1", "e depois?", "resposta 2"],
        )
        self.assertEqual(
            self.client.observed_states[1:],
            [SessionState.AWAITING_FOLLOW_UP, SessionState.AWAITING_FOLLOW_UP],
        )

    def test_follow_up_payload_excludes_in_flight_turn(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.send_follow_up("primeira")
        self.ctrl.send_follow_up("segunda")

        first, second = self.client.payloads[1].text, self.client.payloads[2].text
        self.assertNotIn("Aluno: primeira", first)
        self.assertIn("Aluno: primeira\nProfessor: resposta 1\n", second)
        self.assertNotIn("Aluno: segunda", second)
        self.assertIn('"segunda"', second)

    def test_follow_up_mentions_attached_image(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2", image="data:image/png;base64,AAAA"))
        self.ctrl.send_follow_up("ok?")

        self.assertIn("x^2 [Com Imagem]", self.client.payloads[1].text)

    def test_reset_clears_solution_and_turns(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.send_follow_up("por quê?")
        self.ctrl.reset()

        self.assertIsNone(self.ctrl.solution)
        self.assertEqual(self.ctrl.turns, ())
        self.assertEqual(self.ctrl.mode, ProblemMode.DERIVATIVES)
        self.assertEqual(self.ctrl.ctx.state, SessionState.IDLE)

    def test_go_back_clears_mode(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.go_back()

        self.assertIsNone(self.ctrl.mode)
        self.assertIsNone(self.ctrl.solution)
        self.assertEqual(self.ctrl.ctx.state, SessionState.NO_MODE)

    def test_new_submission_clears_previous_conversation(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.send_follow_up("por quê?")
        self.ctrl.submit_problem(ProblemInput(text="x^3"))

        self.assertEqual(self.ctrl.turns, ())
        self.assertEqual(self.ctrl.solution, "resposta 2")

    def test_empty_submission_is_ignored(self):
        self.assertIsNone(self.ctrl.submit_problem(ProblemInput(text="   ")))
        self.assertEqual(self.client.payloads, [])
        self.assertEqual(self.ctrl.ctx.state, SessionState.IDLE)

    def test_submission_without_mode_raises(self):
        ctrl = SessionController(self.client)
        with self.assertRaises(SessionError):
            ctrl.submit_problem(ProblemInput(text="x^2"))

    def test_follow_up_before_solution_is_ignored(self):
        self.assertIsNone(self.ctrl.send_follow_up("olá"))
        self.assertEqual(self.ctrl.turns, ())
        self.assertEqual(self.client.payloads, [])

    def test_blank_follow_up_is_ignored(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.assertIsNone(self.ctrl.send_follow_up("  "))
        self.assertEqual(self.ctrl.turns, ())

    def test_commands_ignored_while_busy(self):
        self.ctrl.submit_problem(ProblemInput(text="x^2"))
        self.ctrl.ctx.answering = True

        self.assertIsNone(self.ctrl.send_follow_up("de novo"))
        self.assertIsNone(self.ctrl.submit_problem(ProblemInput(text="x^3")))
        self.assertEqual(len(self.client.payloads), 1)

    def test_select_mode_starts_idle(self):
        ctrl = SessionController(self.client)
        ctrl.select_mode(ProblemMode.LIMITS)

        self.assertEqual(ctrl.ctx.state, SessionState.IDLE)
        self.assertEqual(ctrl.snapshot()["mode"], "LIMITS")


class ResettingClient(ScriptedClient):
    """Runs a session command while the given call is still in flight."""

    def __init__(self, *replies, interrupt_on_call, command):
        super().__init__(*replies)
        self.interrupt_on_call = interrupt_on_call
        self.command = command

    def invoke(self, payload):
        reply = super().invoke(payload)
        if len(self.payloads) == self.interrupt_on_call:
            getattr(self.controller, self.command)()
        return reply


class TestCommandsDuringCalls(unittest.TestCase):
    def _controller(self, interrupt_on_call, command):
        client = ResettingClient(
            "solução", "resposta 1",
            interrupt_on_call=interrupt_on_call, command=command,
        )
        ctrl = SessionController(client, mode=ProblemMode.DERIVATIVES)
        client.controller = ctrl
        return ctrl

    def test_reset_during_follow_up_drops_reply(self):
        ctrl = self._controller(interrupt_on_call=2, command="reset")
        ctrl.submit_problem(ProblemInput(text="x^2"))

        self.assertIsNone(ctrl.send_follow_up("por quê?"))
        self.assertEqual(ctrl.turns, ())
        self.assertIsNone(ctrl.solution)
        self.assertFalse(ctrl.answering)
        self.assertEqual(ctrl.ctx.state, SessionState.IDLE)

    def test_reset_during_solve_keeps_solution_empty(self):
        ctrl = self._controller(interrupt_on_call=1, command="reset")

        self.assertIsNone(ctrl.submit_problem(ProblemInput(text="x^2")))
        self.assertIsNone(ctrl.solution)
        self.assertFalse(ctrl.solving)
        self.assertEqual(ctrl.ctx.state, SessionState.IDLE)

    def test_go_back_during_solve(self):
        ctrl = self._controller(interrupt_on_call=1, command="go_back")
        ctrl.submit_problem(ProblemInput(text="x^2"))

        self.assertIsNone(ctrl.solution)
        self.assertEqual(ctrl.ctx.state, SessionState.NO_MODE)

    def test_new_problem_accepted_after_interrupted_call(self):
        ctrl = self._controller(interrupt_on_call=1, command="reset")
        ctrl.submit_problem(ProblemInput(text="x^2"))

        self.assertEqual(ctrl.submit_problem(ProblemInput(text="x^3")), "resposta 1")
        self.assertEqual(ctrl.solution, "resposta 1")


class TestControllerBackstop(unittest.TestCase):
    def test_unexpected_failures_become_display_text(self):
        client = MagicMock()
        client.invoke.side_effect = RuntimeError("boom")
        ctrl = SessionController(client, mode=ProblemMode.INTEGRALS)

        with self.assertLogs("session.controller", level="ERROR"):
            ctrl.submit_problem(ProblemInput(text="\\int x dx"))
        self.assertEqual(ctrl.solution, SOLVE_FAILED_REPLY)
        self.assertFalse(ctrl.solving)

        with self.assertLogs("session.controller", level="ERROR"):
            ctrl.send_follow_up("por quê?")
        self.assertEqual([t.role for t in ctrl.turns], ["user", "model"])
        self.assertEqual(ctrl.turns[-1].content, FOLLOW_UP_FAILED_REPLY)
        self.assertFalse(ctrl.answering)


if __name__ == "__main__":
    unittest.main()
