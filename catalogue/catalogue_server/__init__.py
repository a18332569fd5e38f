"""
Catalogue Server - data-access core of a publisher metadata catalogue.

This package implements the storage layer shared by every catalogue entity
(publishers, imprints, works, publications, contributors, series, funders
and their relationships):
- A static schema model (one EntityDef per table)
- List queries with text filter, sort, publisher/parent scope and paging
- Ownership resolution up the Publisher -> Imprint -> Work tree
- Authorization of mutations against an account's publishers
- Generic CRUD engines with per-entity domain rules
- A transactional audit ledger of pre-update snapshots

Architecture:
    ┌─────────────┐     ┌──────────────────┐     ┌──────────────────┐
    │   Caller    │────▶│ AuthorizationGate│────▶│    EntityCrud    │
    │ (API layer) │     │  (+ Ownership)   │     │ (per entity)     │
    └─────────────┘     └──────────────────┘     └────────┬─────────┘
                                                          │
                                     ┌────────────────────┼───────────────┐
                                     ▼                    ▼               ▼
                               ┌────────────┐      ┌────────────┐  ┌────────────┐
                               │QueryBuilder│      │ AuditLedger│  │ Constraint │
                               │  (reads)   │      │ (history)  │  │ translation│
                               └─────┬──────┘      └─────┬──────┘  └────────────┘
                                     └─────────┬─────────┘
                                               ▼
                                     ┌───────────────────┐
                                     │ SQLite (pooled)   │
                                     └───────────────────┘

Invariants:
    - Every owned entity resolves to exactly one Publisher
    - Mutations are authorized before any write
    - An update and its history row commit together or not at all
    - Keys never change after creation

How to change safely:
    - Add columns to the dataclass, the EntityDef and the DDL together
    - Add enum values, never rename or remove them
    - Add new constraint messages to store/constraints.py

Version: see _version.py.
"""

from ._version import __version__

__all__ = ["__version__"]
