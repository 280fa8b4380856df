"""
Renders help text from the descriptions of a parser's leaves.
"""
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from combinargs.language import Language, default_language
from combinargs.leaves import EarlyExitArgument, Leaf
from combinargs.unicode import width


def render_leaves(
    leaves: Sequence[Leaf],
    program_name: str,
    program_version: Optional[str] = None,
    description: Optional[str] = None,
    language: Optional[Language] = None,
    exe_name: Optional[str] = None,
) -> str:
    """
    >>> from combinargs import flag, value
    >>> from combinargs.parsers import combine
    >>> p = combine(
    ...     lambda *_: None,
    ...     flag("verbose", short="v", default=False, help="Be verbose."),
    ...     value("count", short="c", default=3, convert=int, help="How many."),
    ... )
    >>> print(render_leaves(p.leaves, "prog", "1.0"))
    prog 1.0
    <BLANKLINE>
    prog [OPTIONS]
    <BLANKLINE>
    OPTIONS:
      --[no-]verbose    | -v            Be verbose. [Default: false]
      --count(=| )VALUE | -c[=| ]VALUE  How many. [Default: 3]
    <BLANKLINE>
    """
    if language is None:
        language = default_language()
    if exe_name is None:
        exe_name = program_name

    title = program_name if program_version is None else f"{program_name} {program_version}"
    lines = [title]
    if description:
        lines.append(description)
    lines += ["", f"{exe_name} [{language.options}]", "", f"{language.options}:"]

    longs = [leaf.long_usage() for leaf in leaves]
    long_width = max(map(width, longs), default=0)
    names = []
    for leaf, long in zip(leaves, longs):
        short = leaf.short_usage()
        if short is None:
            names.append(long)
        else:
            names.append(long + " " * (long_width - width(long)) + " | " + short)
    name_width = max(map(width, names), default=0)

    for leaf, name in zip(leaves, names):
        notes = [leaf.description.help, leaf.annotation(language)]
        line = "  " + name + " " * (2 + name_width - width(name))
        line += " ".join(note for note in notes if note)
        lines.append(line.rstrip())
    return "\n".join(lines) + "\n"


def render(
    tree,
    program_name: str,
    program_version: Optional[str] = None,
    description: Optional[str] = None,
    language: Optional[Language] = None,
    exe_name: Optional[str] = None,
) -> str:
    """
    Help text for every leaf of ``tree`` (a :py:class:`combinargs.parsers.Parser`),
    in declaration order.
    """
    return render_leaves(
        tree.leaves,
        program_name=program_name,
        program_version=program_version,
        description=description,
        language=language,
        exe_name=exe_name,
    )


@dataclass(frozen=True)
class HelpArgument(EarlyExitArgument):
    """
    An early-exit flag whose message is the help text of the leaves it was
    rendered with. :py:meth:`refresh` renders it again, for example after
    the affixes of those leaves change.
    """

    program_name: str = ""
    program_version: Optional[str] = None
    about: Optional[str] = None
    language: Optional[Language] = None
    exe_name: Optional[str] = None

    def refresh(self, leaves: Sequence[Leaf]) -> "HelpArgument":
        return replace(
            self,
            message=render_leaves(
                leaves,
                program_name=self.program_name,
                program_version=self.program_version,
                description=self.about,
                language=self.language,
                exe_name=self.exe_name,
            ),
        )
