# Services package init
"""
HotOrNot Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services take an AsyncSession per call, apply the rules, and return
       schema objects. Routes import the module-level instances.

Service Inventory:
    - ImageStore: image rows, counters, rating projection
    - VoteLedger: append-only vote rows and per-image tallies
    - VotingService: validates a vote and applies it atomically
    - RankingService: scores and hot/not leaderboards
    - UploadService: upload validation, file storage, image registration
"""
