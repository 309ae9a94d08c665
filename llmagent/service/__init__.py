"""Consumers of the relay: console CLI, HTTP endpoint and interactive chat."""
