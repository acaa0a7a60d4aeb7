# Unit tests for the tutoring session state holder
import json
import unittest
from unittest.mock import Mock

from backend.chat_client import APOLOGY_MESSAGE, TurnResult
from backend.errors import ChatFailure, SessionBusyError
from backend.graph_client import GraphResult
from backend.models import LearningGraph, LearningStyle, fallback_graph
from backend.session import TutorSession


def make_response(content):
    message = Mock()
    message.content = content
    choice = Mock()
    choice.message = message
    response = Mock()
    response.choices = [choice]
    response.usage = Mock(total_tokens=42)
    return response


RECURSION_GRAPH = {
    "nodes": [
        {"id": "start", "label": "Start", "status": "active"},
        {"id": "n2", "label": "Base Case", "status": "pending"},
    ],
    "links": [{"source": "start", "target": "n2"}],
}


def started_session(turn_requester=None):
    graph = LearningGraph(**RECURSION_GRAPH)
    kwargs = {"graph_requester": lambda objective, client=None: GraphResult(graph=graph)}
    if turn_requester is not None:
        kwargs["turn_requester"] = turn_requester
    session = TutorSession(**kwargs)
    session.start_session("Learn recursion")
    return session


class TestStartSession(unittest.TestCase):
    def test_learn_recursion_scenario(self):
        client = Mock()
        client.chat.completions.create.return_value = make_response(json.dumps(RECURSION_GRAPH))
        session = TutorSession(client=client)

        session.start_session("Learn recursion")

        self.assertTrue(session.has_started)
        self.assertFalse(session.is_loading)
        self.assertEqual(session.state.objective, "Learn recursion")
        self.assertEqual(session.state.current_node_id, "start")
        self.assertEqual(len(session.messages), 1)
        welcome = session.messages[0]
        self.assertEqual(welcome.role, "model")
        self.assertEqual(welcome.author_name, "AI_Tutor")
        self.assertIn("**Start**", welcome.text)
        self.assertIn("Learn recursion", welcome.text)
        self.assertEqual([t.role for t in session.history], ["model"])

    def test_failure_uses_fallback_graph(self):
        client = Mock()
        client.chat.completions.create.side_effect = ConnectionError("offline")
        session = TutorSession(client=client)

        result = session.start_session("Learn recursion")

        self.assertFalse(result.ok)
        self.assertEqual(session.graph, fallback_graph())
        self.assertEqual(session.state.current_node_id, "start")
        self.assertIsNotNone(session.last_error)
        self.assertEqual(len(session.messages), 1)

    def test_empty_graph_starts_at_start(self):
        session = TutorSession(
            graph_requester=lambda objective, client=None: GraphResult(graph=LearningGraph())
        )
        session.start_session("Anything")
        self.assertEqual(session.state.current_node_id, "start")
        self.assertIn("**Start**", session.messages[0].text)

    def test_loading_flag_cleared_when_requester_raises(self):
        def broken(objective, client=None):
            raise RuntimeError("unexpected")

        session = TutorSession(graph_requester=broken)
        with self.assertRaises(RuntimeError):
            session.start_session("x")
        self.assertFalse(session.is_loading)
        self.assertFalse(session.has_started)


class TestSendMessage(unittest.TestCase):
    def test_log_grows_by_two(self):
        session = started_session(lambda *a, **k: TurnResult(text="**ScopeGuard:** focus"))
        before = len(session.messages)

        reply = session.send_message("Let's talk about cooking")

        self.assertEqual(len(session.messages), before + 2)
        self.assertEqual(session.messages[-2].role, "user")
        self.assertEqual(session.messages[-2].text, "Let's talk about cooking")
        self.assertEqual(reply.role, "model")
        self.assertEqual(reply.author_name, "ScopeGuard")
        self.assertFalse(session.is_typing)

    def test_user_message_is_appended_before_model_call(self):
        seen = {}

        def requester(history, text, context, client=None):
            seen["messages"] = len(session.messages)
            seen["typing"] = session.is_typing
            return TurnResult(text="ok")

        session = started_session(requester)
        before = len(session.messages)
        session.send_message("hello")
        self.assertEqual(seen["messages"], before + 1)
        self.assertTrue(seen["typing"])

    def test_failed_call_still_appends_reply(self):
        client = Mock()
        client.chat.completions.create.side_effect = ConnectionError("offline")
        session = started_session()
        session.client = client
        before = len(session.messages)

        reply = session.send_message("hello")

        self.assertEqual(len(session.messages), before + 2)
        self.assertEqual(reply.text, APOLOGY_MESSAGE)
        self.assertEqual(reply.author_name, "AI_Tutor")
        self.assertIsInstance(session.last_error, ChatFailure)

    def test_history_and_context_passed_to_client(self):
        calls = []

        def requester(history, text, context, client=None):
            calls.append((list(history), text, context))
            return TurnResult(text="reply")

        session = started_session(requester)
        session.send_message("first")
        session.send_message("second")

        history, text, context = calls[1]
        self.assertEqual(text, "second")
        self.assertEqual([t.role for t in history], ["model", "user", "model"])
        self.assertEqual(history[1].text, "first")
        self.assertEqual(context.objective, "Learn recursion")
        self.assertEqual(context.current_node_label, "Start")
        self.assertEqual(context.style, LearningStyle.SOCRATIC)

    def test_declared_author_is_used(self):
        session = started_session(lambda *a, **k: TurnResult(text="plain", author="Dima"))
        self.assertEqual(session.send_message("hi").author_name, "Dima")

    def test_second_send_while_typing_is_rejected(self):
        session = started_session(lambda *a, **k: TurnResult(text="ok"))
        session.submit_user_message("first")
        with self.assertRaises(SessionBusyError):
            session.send_message("second")
        session.complete_turn("first")
        self.assertFalse(session.busy)

    def test_interrupted_turn_leaves_session_idle(self):
        requester = Mock(return_value=TurnResult(text="ok"))
        session = started_session(requester)

        def interrupt(message):
            raise RuntimeError("rerun")

        with self.assertRaises(RuntimeError):
            session.send_message("hello", on_submitted=interrupt)

        self.assertFalse(session.busy)
        self.assertEqual([m.role for m in session.messages], ["model", "user"])
        requester.assert_not_called()
        self.assertEqual(session.send_message("again").text, "ok")

    def test_on_submitted_receives_user_message(self):
        drawn = []
        session = started_session(lambda *a, **k: TurnResult(text="ok"))
        session.send_message("hello", on_submitted=drawn.append)
        self.assertEqual([m.text for m in drawn], ["hello"])
        self.assertEqual(drawn[0].role, "user")

    def test_reset_while_typing(self):
        session = started_session()
        session.submit_user_message("stuck")
        session.reset()
        self.assertFalse(session.busy)
        self.assertFalse(session.has_started)

    def test_unknown_current_node_label(self):
        session = started_session()
        session.select_node("missing")
        self.assertEqual(session.context().current_node_label, "Unknown")


class TestSelectNode(unittest.TestCase):
    def test_known_node(self):
        session = started_session()
        session.select_node("n2")
        self.assertEqual(session.state.current_node_id, "n2")
        self.assertEqual(session.current_node_label(), "Base Case")

    def test_unknown_node_is_not_validated(self):
        session = started_session()
        session.select_node("does-not-exist")
        self.assertEqual(session.state.current_node_id, "does-not-exist")


class TestLearningStyle(unittest.TestCase):
    def test_toggle_alternates_socratic_and_direct(self):
        session = TutorSession()
        seen = [session.toggle_style() for _ in range(6)]
        self.assertEqual(seen, [LearningStyle.DIRECT, LearningStyle.SOCRATIC] * 3)
        self.assertNotIn(LearningStyle.HYBRID, seen)

    def test_toggle_from_hybrid_goes_to_socratic(self):
        session = TutorSession()
        session.set_style(LearningStyle.HYBRID)
        self.assertEqual(session.toggle_style(), LearningStyle.SOCRATIC)

    def test_all_three_styles_exist(self):
        self.assertEqual(
            [style.value for style in LearningStyle], ["Socratic", "Direct", "Hybrid"]
        )

    def test_set_style_accepts_value(self):
        session = TutorSession()
        self.assertEqual(session.set_style("Hybrid"), LearningStyle.HYBRID)


class TestDerivedValues(unittest.TestCase):
    def test_traversal_percent(self):
        self.assertEqual(TutorSession().traversal_percent(), 0)
        self.assertEqual(started_session().traversal_percent(), 50)

    def test_reset(self):
        session = started_session()
        session.reset()
        self.assertFalse(session.has_started)
        self.assertEqual(session.messages, [])
        self.assertEqual(session.state.current_node_id, "start")


if __name__ == "__main__":
    unittest.main()
