"""Taskboard: typed query/mutation procedures over users, tasks, teams and tags."""
