"""TUI applications package.

Available applications:
- navigator: Browse Upbound Spaces and switch the kubeconfig context
"""
