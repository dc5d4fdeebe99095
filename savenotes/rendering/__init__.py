"""Markup rendering for decoded note bodies.

Contains:
- base: shared run traversal and the block-group state machine
- plain, html_renderer, markdown: one renderer per output format
- renderer: format lookup and full-page HTML wrapping
- debug_tools: run-to-text inspection helpers
"""
