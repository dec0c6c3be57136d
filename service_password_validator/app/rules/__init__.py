"""
Rules package.

Defines the password rule model, the per-tenant rule registry and the
stock rule set a tenant starts with.

Modules of interest:
- models: Rule, TenantContext, RuleOutcome, Verdict and API schemas.
- registry: CRUD store enforcing rule invariants.
- defaults: Default pattern rules.
"""
