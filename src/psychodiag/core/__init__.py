"""
Scoring core.

This package contains:
- tokenizer: split CSV text into lines and fields
- diagnostics: decode-failure events and the sinks that receive them
- decoders: per-test text-to-value decoders
- definitions: fixed question-to-category maps and threshold tables
- levels: band classification (low / medium / high and test-specific bands)
- scoring: per-test category aggregation
- assembler: one RespondentRecord per valid CSV row
- report: cohort means, per-test tables and per-question breakdowns
- errors: exceptions raised at the file-intake and reporting boundaries
"""
