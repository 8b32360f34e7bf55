# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import sqlite3
import unittest
from datetime import date
from typing import List, Optional, Tuple

from nutrition_assistant.app_db import create_schema
from nutrition_assistant.assistant.relay import run_relay
from nutrition_assistant.errors import PersistenceError, UpstreamError, ValidationError

BANANA_REPLY = json.dumps(
    {
        "type": "food_entry",
        "food_data": {
            "food_name": "Banana",
            "serving_qty": 1,
            "serving_size": "medium (118g)",
            "calories": 105,
            "protein": 1.3,
            "carbs": 27,
            "fat": 0.3,
            "meal_type": "Breakfast",
        },
        "response": "Logged!",
    }
)


class FakeLLM:
    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def complete(self, *, system: str, user: str) -> str:
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply


class TestRunRelay(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.row_factory = sqlite3.Row
        create_schema(self.conn)

    def tearDown(self) -> None:
        self.conn.close()

    def _rows(self) -> list:
        return [dict(r) for r in self.conn.execute("SELECT * FROM food_logs ORDER BY rowid").fetchall()]

    def test_food_entry_is_logged(self) -> None:
        llm = FakeLLM(BANANA_REPLY)
        result = run_relay(
            conn=self.conn,
            llm=llm,
            user_id="u1",
            message="I ate a banana",
            timestamp="2024-05-01T08:15:00",
            today=date(2024, 5, 1),
        )

        self.assertEqual(result.response, "Logged!")
        rows = self._rows()
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row["user_id"], "u1")
        self.assertEqual(row["food_name"], "Banana")
        self.assertEqual(row["calories"], 105.0)
        self.assertEqual(row["protein"], 1.3)
        self.assertEqual(row["carbs"], 27.0)
        self.assertEqual(row["fat"], 0.3)
        self.assertEqual(row["meal_type"], "Breakfast")
        self.assertEqual(row["serving_qty"], 1.0)
        self.assertEqual(row["serving_size"], "medium (118g)")
        self.assertEqual(row["log_date"], "2024-05-01")

        assert result.food_data is not None
        self.assertEqual(result.food_data.id, row["id"])
        payload = result.to_payload()
        self.assertEqual(payload["foodData"]["food_name"], "Banana")
        self.assertEqual(payload["response"], "Logged!")

        system, user = llm.calls[0]
        self.assertEqual(user, "I ate a banana")
        self.assertIn('use meal_type "Breakfast"', system)
        self.assertIn("Recently logged: nothing yet.", system)

    def test_conversation_writes_nothing(self) -> None:
        llm = FakeLLM('{"type": "conversation", "response": "Protein helps with recovery."}')
        result = run_relay(conn=self.conn, llm=llm, user_id="u1", message="What does protein do?")
        self.assertEqual(result.response, "Protein helps with recovery.")
        self.assertIsNone(result.food_data)
        self.assertIsNone(result.to_payload()["foodData"])
        self.assertEqual(self._rows(), [])

    def test_malformed_reply_passes_through(self) -> None:
        raw = "A banana has roughly 105 calories."
        result = run_relay(conn=self.conn, llm=FakeLLM(raw), user_id="u1", message="banana?")
        self.assertEqual(result.response, raw)
        self.assertIsNone(result.food_data)
        self.assertEqual(self._rows(), [])

    def test_empty_message_is_rejected_before_upstream(self) -> None:
        llm = FakeLLM(BANANA_REPLY)
        for message in ("", "   \n", None):
            with self.assertRaises(ValidationError) as ctx:
                run_relay(conn=self.conn, llm=llm, user_id="u1", message=message)
            self.assertEqual(ctx.exception.message, "Message is required")
            self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(llm.calls, [])
        self.assertEqual(self._rows(), [])

    def test_upstream_failure_writes_nothing(self) -> None:
        llm = FakeLLM(error=UpstreamError("Text generation API error (503): overloaded"))
        with self.assertRaises(UpstreamError) as ctx:
            run_relay(conn=self.conn, llm=llm, user_id="u1", message="I ate a banana")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(self._rows(), [])

    def test_prompt_lists_five_most_recent_foods(self) -> None:
        foods = ["Eggs", "Toast", "Salad", "Rice", "Chicken", "Yogurt"]
        for i, name in enumerate(foods):
            self.conn.execute(
                """
                INSERT INTO food_logs (id, user_id, food_name, calories, protein, carbs, fat,
                                       meal_type, log_date, created_at)
                VALUES (?, 'u1', ?, 100, 1, 1, 1, 'Lunch', '2024-05-01', ?)
                """,
                (f"f{i}", name, f"2024-05-01T10:0{i}:00+00:00"),
            )
        self.conn.execute(
            """
            INSERT INTO food_logs (id, user_id, food_name, calories, protein, carbs, fat,
                                   meal_type, log_date, created_at)
            VALUES ('other', 'u2', 'Pizza', 100, 1, 1, 1, 'Dinner', '2024-05-01', '2024-05-01T11:00:00+00:00')
            """
        )

        llm = FakeLLM('{"type": "conversation", "response": "ok"}')
        run_relay(conn=self.conn, llm=llm, user_id="u1", message="what did I eat?")
        system, _ = llm.calls[0]
        self.assertIn("Recently logged: Yogurt, Chicken, Rice, Salad, Toast.", system)
        self.assertNotIn("Eggs", system)
        self.assertNotIn("Pizza", system)

    def test_missing_timestamp_defaults_prompt_to_snack(self) -> None:
        llm = FakeLLM('{"type": "conversation", "response": "ok"}')
        run_relay(conn=self.conn, llm=llm, user_id="u1", message="hello", timestamp="garbage")
        self.assertIn('use meal_type "Snack"', llm.calls[0][0])

    def test_non_finite_nutrition_is_not_logged(self) -> None:
        for literal in ("Infinity", "NaN", "1e999"):
            raw = BANANA_REPLY.replace('"calories": 105', f'"calories": {literal}')
            result = run_relay(conn=self.conn, llm=FakeLLM(raw), user_id="u1", message="I ate a banana")
            self.assertIsNone(result.food_data, msg=literal)
            self.assertEqual(result.response, raw)
        self.assertEqual(self._rows(), [])

    def test_insert_failure_raises_persistence_error(self) -> None:
        self.conn.execute("DROP TABLE food_logs")
        with self.assertRaises(PersistenceError) as ctx:
            run_relay(conn=self.conn, llm=FakeLLM(BANANA_REPLY), user_id="u1", message="I ate a banana")
        self.assertTrue(ctx.exception.message.startswith("Failed to log food"))
        self.assertEqual(ctx.exception.status_code, 500)

    def test_resubmission_logs_again(self) -> None:
        llm = FakeLLM(BANANA_REPLY)
        first = run_relay(conn=self.conn, llm=llm, user_id="u1", message="I ate a banana")
        second = run_relay(conn=self.conn, llm=llm, user_id="u1", message="I ate a banana")
        assert first.food_data is not None and second.food_data is not None
        self.assertNotEqual(first.food_data.id, second.food_data.id)
        self.assertEqual(len(self._rows()), 2)
        self.assertIn("Recently logged: Banana.", llm.calls[1][0])


if __name__ == "__main__":
    unittest.main()
