"""CLI entry point for dynamo-batch-tool."""

import click

from dynamo_batch_tool.store.commands.batch_commands import (
    batch_get_command,
    batch_write_command,
    delete_command,
)
from dynamo_batch_tool.store.commands.item_commands import (
    get_command,
    history_command,
    put_command,
)
from dynamo_batch_tool.store.commands.table_commands import (
    create_table_command,
    drop_table_command,
)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Batched, retrying access to a DynamoDB PK/SK table"""
    pass


@main.group("store")
def store() -> None:
    """Batch writes, batch gets, partition history and bulk deletes"""
    pass


# Register table commands
store.add_command(create_table_command)
store.add_command(drop_table_command)

# Register item commands
store.add_command(put_command)
store.add_command(get_command)
store.add_command(history_command)

# Register batch commands
store.add_command(batch_write_command)
store.add_command(batch_get_command)
store.add_command(delete_command)

if __name__ == "__main__":
    main()
