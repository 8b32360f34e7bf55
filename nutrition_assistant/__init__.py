# -*- coding: utf-8 -*-
"""Nutrition assistant backend.

Domains: auth / profiles / food logs / chat, plus the classification relay
(`assistant`) that turns chat messages into food-log entries.
"""
