"""
Todo subsystem.

Components:
- models.py: data structures (Todo, TodoPatch, TodoMove) and field validation
- tree.py: descendant / children queries over parent_id links
- todo_store.py: SQLite row primitives, grouped per transaction
- todo_api.py: the mutation engine (create/update/reorder/delete)
- render.py: text outline of the forest for the console
"""
