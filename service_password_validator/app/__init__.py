"""
Password Validator service package.

Validates candidate passwords against per-tenant rule sets. It provides:

- app.main: API surface for validation, rule management and health.
- app.engine: Orchestrator, evaluators and result aggregation.
- app.rules: Rule model, registry and default rules.
- app.users: Identity lookup client.

Guidelines:
- Candidate passwords live only for the duration of one call; never log them.
- Verdict ordering depends on rule order only, never on completion order.
"""
