"""Azure DevOps PAT MCP Server Package.

This package exposes Azure DevOps projects, repositories, work items, pipelines, wikis,
search, test plans and Advanced Security alerts as Model Context Protocol (MCP) tools,
authenticated with a Personal Access Token only.
"""

__version__ = '0.1.0'
__author__ = 'TechniumLabs'
__description__ = 'Azure DevOps MCP Server with Personal Access Token authentication'
