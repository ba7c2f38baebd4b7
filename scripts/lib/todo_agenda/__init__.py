"""todo.txt parsing and weekly agenda bucketing."""
