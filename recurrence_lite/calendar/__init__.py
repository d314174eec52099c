"""Recurrence rule models, expansion, descriptions and calendar grid helpers."""
