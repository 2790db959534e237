from rich.pretty import pprint

from fluentflag import *
from fluentflag import flagset

builder = FlagBuilder()
name = builder.string_flag("name", "who to greet").alias("n").default("world").build_var()
loud = builder.bool_flag("loud", "shout the greeting").alias("l").build_var()
tags = builder.string_flag("tag", "repeatable tag").alias("t").build_slice()


if __name__ == '__main__':
    flagset.parse_command_line()
    pprint(builder.built)
    pprint({"name": name.value, "loud": loud.value, "tags": tags, "args": flagset.command_line.args})
