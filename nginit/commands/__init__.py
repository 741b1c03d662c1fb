"""Click commands registered on the ``ng-init`` group in :mod:`nginit.cli`."""
