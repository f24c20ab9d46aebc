"""
Prompt templates for the classifier, design generator and chat reply.

All builders are pure functions of the user request (and the catalog).
"""

from __future__ import annotations

from typing import Sequence

from infraai.models import SystemComponent

SYSTEM_DESIGN_LABEL = "SYSTEM_DESIGN"
GENERAL_CHAT_LABEL = "GENERAL_CHAT"

FALLBACK_MESSAGE = (
    "I'm InfraAI, an AI assistant specializing in system design and architecture. "
    "I can help you:\n\n"
    "• Design scalable system architectures\n"
    "• Choose the right components for your needs\n"
    "• Create visual system diagrams\n"
    "• Answer questions about technology and engineering\n"
    "• Have general conversations about tech topics\n\n"
    "How can I assist you today?"
)

DEFAULT_DESIGN_MESSAGE = "Here's your system design:"


# ============================================================================
# Classification
# ============================================================================

CLASSIFICATION_TEMPLATE = """
You are InfraAI, an assistant that helps with both general conversation and system design.
Your role is to be friendly, helpful, and knowledgeable about technology and system architecture.

Analyze the following user message and determine if it's asking for system design/architecture help or if it's a general conversation.

User message: "{user_request}"

System design keywords to look for: design, architecture, system, scalable, database, API, microservices, cloud, infrastructure, backend, frontend, load balancer, cache, storage, deployment, etc.

Respond with ONLY one of these:
- "{system_design}" if the user is asking for system architecture, design patterns, or technical system recommendations
- "{general_chat}" if the user is having a general conversation, asking questions, chatting about non-system-design topics, or asking about you

Consider these examples:
- "Hello, how are you?" -> {general_chat}
- "What's the weather like?" -> {general_chat}
- "Tell me about yourself" -> {general_chat}
- "Design a chat application" -> {system_design}
- "How to build a scalable e-commerce platform?" -> {system_design}
- "What database should I use for my app?" -> {system_design}
"""


def build_classification_prompt(user_request: str) -> str:
    return CLASSIFICATION_TEMPLATE.format(
        user_request=user_request,
        system_design=SYSTEM_DESIGN_LABEL,
        general_chat=GENERAL_CHAT_LABEL,
    )


# ============================================================================
# Design generation
# ============================================================================

DESIGN_TEMPLATE = """
You are an expert system design assistant with a friendly personality.

Analyze the following user request and recommend the most appropriate system components from the available list, organized into logical groups (e.g., Frontend, Backend, Database, Networking, etc.).

For each group, recommend the most relevant components. Then, for each connection between groups (not between individual components), specify a short, meaningful label describing the interaction (e.g., "HTTP", "API Call", "DB Query", "DNS Lookup").

User Request: "{user_request}"

Available Components ({component_count} total):
{component_list}

Please provide a JSON response with the following structure:
{{
  "title": "A concise, descriptive title for this system design (e.g., 'WhatsApp-like Real-Time Chat System Architecture')",
  "explanation": "A friendly explanation of the system design with technical details",
  "groups": [
    {{
      "name": "Frontend",
      "color": "#3b82f6",
      "icon": "react",
      "components": [
        {{ "id": "component_id" }}
      ]
    }}
  ],
  "connections": [
    {{
      "from": "Frontend",
      "to": "Backend",
      "label": "HTTP"
    }}
  ]
}}

IMPORTANT GUIDELINES:
1. Be friendly and explain your reasoning
2. Only create connections between groups (not between individual components)
3. Each connection label must be a short, meaningful description
4. Use group names for the "from" and "to" fields in connections
5. Only recommend groups and connections directly relevant to the user's requirements
6. Only use component ids from the available list
7. Provide a helpful explanation of the architecture
8. The 'title' field should be a short, descriptive summary of the system design topic
"""


def format_component(component: SystemComponent) -> str:
    """One catalog line as the generator sees it."""
    return (
        f"- {component.name} (ID: {component.id}, Type: {component.type}): "
        f"{component.description} "
        f"[Tags: {', '.join(component.tags)}, "
        f"Inputs: {', '.join(component.inputs)}, "
        f"Outputs: {', '.join(component.outputs)}]"
    )


def build_design_prompt(user_request: str, catalog: Sequence[SystemComponent]) -> str:
    return DESIGN_TEMPLATE.format(
        user_request=user_request,
        component_count=len(catalog),
        component_list="\n".join(format_component(c) for c in catalog),
    )


# ============================================================================
# General chat
# ============================================================================

CHAT_TEMPLATE = """
You are a friendly AI assistant who specializes in technology and system design. You're knowledgeable, helpful, and engaging.

About you:
- You're an expert in system architecture, software engineering, and technology
- You can help with both technical questions and general conversation
- You're friendly, approachable, and enjoy helping people learn
- You have a passion for building scalable, efficient systems
- You love discussing technology trends, programming, and system design

If the user asks personal questions about your identity (such as "what is your name?", "who are you?", "tell me about yourself"), respond with: "I'm here to help! Feel free to ask me about system design, technology, or just chat about anything else."

User message: "{user_request}"

Respond naturally and helpfully. If the user asks about system design or architecture, let them know you can help them design systems and create architecture diagrams. Keep your response conversational and engaging.
"""


def build_chat_prompt(user_request: str) -> str:
    return CHAT_TEMPLATE.format(user_request=user_request)
