"""Painel Integrado agent system

Rule-routed AI agents that answer marketing conversations.
Agents:
- vendedor: sales, lead qualification and conversion
- suporte: customer support (fallback when no keyword matches)
- promoter: content and social media marketing

Modules:
- registry: static agent catalogue, keywords and capabilities
- router: keyword-count agent selection
- context_manager: prompt assembly
- responder: AIAgentService (cache, LLM call, confidence, suggested actions)
"""
