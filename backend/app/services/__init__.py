"""Services Layer — room lifecycle, translation pipelines, users and master data.

Invariants:
    - Services receive their adapters through the constructor (built in api/dependencies)
    - Services raise TranslatorError subclasses; they never return error envelopes

Design Decisions:
    - One service per use-case family for locality
"""
