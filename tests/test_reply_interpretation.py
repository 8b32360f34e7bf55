# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest

from nutrition_assistant.assistant.parsing import parse_model_json
from nutrition_assistant.assistant.relay import build_system_prompt, interpret_reply
from nutrition_assistant.food.models import MealType


def _food_entry(**food_overrides) -> str:
    food = {
        "food_name": "Banana",
        "serving_qty": 1,
        "serving_size": "medium (118g)",
        "calories": 105,
        "protein": 1.3,
        "carbs": 27,
        "fat": 0.3,
        "meal_type": "Breakfast",
    }
    food.update(food_overrides)
    food = {k: v for k, v in food.items() if v is not ...}
    return json.dumps({"type": "food_entry", "food_data": food, "response": "Logged!"})


class TestParseModelJson(unittest.TestCase):
    def test_code_fence_and_prose_are_tolerated(self) -> None:
        content = 'Here you go:\n```json\n{"type": "conversation", "response": "Hi!",}\n```'
        self.assertEqual(parse_model_json(content), {"type": "conversation", "response": "Hi!"})

    def test_braces_inside_strings_do_not_split_objects(self) -> None:
        content = '{"type": "conversation", "response": "use {curly} braces"}'
        self.assertEqual(parse_model_json(content)["response"], "use {curly} braces")

    def test_curly_quotes_are_repaired(self) -> None:
        content = "{“type”: “conversation”, “response”: “Hi!”}"
        self.assertEqual(parse_model_json(content), {"type": "conversation", "response": "Hi!"})

    def test_non_finite_literals_become_null(self) -> None:
        parsed = parse_model_json('{"calories": NaN, "protein": Infinity, "fat": -Infinity, "carbs": 3}')
        self.assertEqual(parsed, {"calories": None, "protein": None, "fat": None, "carbs": 3})

    def test_no_object_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_model_json("just some words")
        with self.assertRaises(ValueError):
            parse_model_json("{not: json at all")


class TestInterpretReply(unittest.TestCase):
    def test_food_entry_copies_fields(self) -> None:
        text, food = interpret_reply(_food_entry(), default_meal_type=MealType.lunch)
        self.assertEqual(text, "Logged!")
        assert food is not None
        self.assertEqual(food.food_name, "Banana")
        self.assertEqual(food.serving_qty, 1.0)
        self.assertEqual(food.serving_size, "medium (118g)")
        self.assertEqual(food.calories, 105.0)
        self.assertEqual(food.protein, 1.3)
        self.assertEqual(food.carbs, 27.0)
        self.assertEqual(food.fat, 0.3)
        self.assertEqual(food.meal_type, MealType.breakfast)

    def test_missing_meal_type_and_serving_use_defaults(self) -> None:
        raw = _food_entry(meal_type=..., serving_qty=None, serving_size=...)
        _, food = interpret_reply(raw, default_meal_type=MealType.dinner)
        assert food is not None
        self.assertEqual(food.meal_type, MealType.dinner)
        self.assertEqual(food.serving_qty, 1.0)
        self.assertEqual(food.serving_size, "serving")

    def test_unknown_meal_type_falls_back_to_default(self) -> None:
        _, food = interpret_reply(_food_entry(meal_type="Brunch"), default_meal_type=MealType.lunch)
        assert food is not None
        self.assertEqual(food.meal_type, MealType.lunch)

    def test_numeric_strings_are_coerced(self) -> None:
        _, food = interpret_reply(_food_entry(calories="105 kcal", protein="1.3g"), default_meal_type=MealType.snack)
        assert food is not None
        self.assertEqual(food.calories, 105.0)
        self.assertEqual(food.protein, 1.3)

    def test_number_strings_keep_their_magnitude(self) -> None:
        _, food = interpret_reply(
            _food_entry(serving_qty=".5", calories="1.2e2", carbs="1,200 mg"),
            default_meal_type=MealType.snack,
        )
        assert food is not None
        self.assertEqual(food.serving_qty, 0.5)
        self.assertEqual(food.calories, 120.0)
        self.assertEqual(food.carbs, 1200.0)

    def test_non_finite_and_boolean_numbers_are_rejected(self) -> None:
        cases = [
            _food_entry(calories=True),
            _food_entry(protein=False),
            _food_entry(serving_qty=True),
            _food_entry(calories="1e999"),
            _food_entry(calories=float("inf")),
            _food_entry(fat=float("nan")),
            _food_entry().replace('"calories": 105', '"calories": 1e999'),
        ]
        for raw in cases:
            text, food = interpret_reply(raw, default_meal_type=MealType.snack)
            self.assertIsNone(food, msg=raw)
            self.assertEqual(text, raw)

    def test_response_text_fallbacks(self) -> None:
        raw = json.dumps(
            {
                "type": "food_entry",
                "food_data": {
                    "food_name": "Apple",
                    "calories": 95,
                    "protein": 0.5,
                    "carbs": 25,
                    "fat": 0.3,
                    "response_text": "Apple logged.",
                },
            }
        )
        text, _ = interpret_reply(raw, default_meal_type=MealType.snack)
        self.assertEqual(text, "Apple logged.")

        raw = json.dumps(
            {
                "type": "food_entry",
                "food_data": {"food_name": "Apple", "serving_size": "medium (182g)", "calories": 95, "protein": 0.5, "carbs": 25, "fat": 0.3},
            }
        )
        text, _ = interpret_reply(raw, default_meal_type=MealType.snack)
        self.assertEqual(text, "I've logged 1 medium (182g) Apple: 95 calories, 0.3g fat, 0.5g protein, 25g carbs")

    def test_conversation_has_no_food(self) -> None:
        text, food = interpret_reply(
            '{"type": "conversation", "response": "Protein helps with recovery."}',
            default_meal_type=MealType.snack,
        )
        self.assertEqual(text, "Protein helps with recovery.")
        self.assertIsNone(food)

    def test_schema_violations_pass_raw_text_through(self) -> None:
        cases = [
            "Sure, a banana is about 105 calories.",
            '{"type": "recipe", "response": "x"}',
            '{"type": "food_entry", "response": "Logged!"}',
            '{"type": "conversation"}',
            _food_entry(calories=...),
            _food_entry(calories=-5),
            _food_entry(food_name="   "),
            _food_entry(serving_qty=0),
            _food_entry(fat="lots"),
        ]
        for raw in cases:
            text, food = interpret_reply(raw, default_meal_type=MealType.snack)
            self.assertIsNone(food, msg=raw)
            self.assertEqual(text, raw)


class TestSystemPrompt(unittest.TestCase):
    def test_includes_default_meal_and_recent_foods(self) -> None:
        prompt = build_system_prompt(MealType.breakfast, ["Oatmeal", "Coffee"])
        self.assertIn('use meal_type "Breakfast"', prompt)
        self.assertIn("Recently logged: Oatmeal, Coffee.", prompt)
        self.assertIn('"type": "food_entry"', prompt)
        self.assertIn('"type": "conversation"', prompt)


if __name__ == "__main__":
    unittest.main()
