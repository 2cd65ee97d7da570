"""CLI entry point for Workflow Agents."""

import argparse
import asyncio
import uuid
from typing import List, Optional

from .api.client import WorkflowAgentsClient
from .agents.registry import AgentRegistry
from .models.context import RunContext
from .models.roles import SPECIALIZED_ROLES, AgentRole


async def process_message(
    message: str,
    context: RunContext,
    agents: Optional[List[str]] = None,
    max_cost: Optional[float] = None
) -> int:
    """Process a message and print the response as JSON."""
    try:
        client = WorkflowAgentsClient()
        response = await client.process_workflow(
            message,
            context,
            required_agents=[AgentRole(a) for a in agents] if agents is not None else None,
            max_cost=max_cost
        )
    except Exception as e:
        print(f"Error: {str(e)}")
        return 1

    print(response.model_dump_json(indent=2))
    return 0 if response.success else 1


def list_agents() -> int:
    """List all agents and their capabilities."""
    registry = AgentRegistry()

    print("Available Agents:")
    print("-" * 50)
    for agent in registry.all():
        print(f"{agent.name} [{agent.role.value}] ({agent.id})")
        print(f"   {agent.description}")
        for capability in agent.capabilities:
            print(f"   - {capability}")
        if agent.tools:
            print(f"   Tools: {', '.join(agent.tool_names)}")
        print()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = argparse.ArgumentParser(description="Workflow Agents CLI")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Process command
    process_parser = subparsers.add_parser('process', help='Analyze a request with the agents')
    process_parser.add_argument('message', help='The request to analyze')
    process_parser.add_argument(
        '--agents',
        nargs='*',
        choices=[role.value for role in SPECIALIZED_ROLES],
        help='Specialized agents to run (default: selected from the message)'
    )
    process_parser.add_argument('--max-cost', type=float, help='Cost ceiling in USD')
    process_parser.add_argument('--org', default='default-org', help='Organization id')
    process_parser.add_argument('--user', default='cli-user', help='User id')
    process_parser.add_argument('--role', default='developer', help='User role')
    process_parser.add_argument('--session', help='Session id (default: random)')
    process_parser.add_argument(
        '--permission',
        action='append',
        default=[],
        help='Granted permission (repeatable)'
    )

    # List agents command
    subparsers.add_parser('agents', help='List agents and their capabilities')

    args = parser.parse_args(argv)

    if args.command == 'process':
        context = RunContext(
            organization_id=args.org,
            user_id=args.user,
            user_role=args.role,
            permissions=args.permission,
            session_id=args.session or str(uuid.uuid4())
        )
        return asyncio.run(process_message(args.message, context, args.agents, args.max_cost))
    elif args.command == 'agents':
        return list_agents()
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
