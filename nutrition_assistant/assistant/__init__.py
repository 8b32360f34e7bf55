# -*- coding: utf-8 -*-
"""Classification relay.

Turns one free-text chat message into either a structured food-log entry
(written to `food_logs`) or a conversational reply, using an OpenAI-compatible
text-generation API.
"""
