"""Rest adjustment rules; RuleRegistry.default() collects the standard set."""
