"""Declarations and handlers for every ``opam`` command.

Each handler receives an :class:`~opam_cli.cli.descriptors.Invocation`
whose option groups have already been applied to the configuration.
It converts what is still raw (sub-verb parameters, pin targets,
repository addresses), builds exactly one action and hands it to the
engine with :meth:`Invocation.execute`.

No business logic lives here: what an action *does* is the engine's
concern.
"""

from __future__ import annotations

from enum import Enum

from opam_cli.cli import exit_codes
from opam_cli.cli.console import output
from opam_cli.cli.converters import (
    ADDRESS,
    BASENAME,
    COMPILER,
    FILENAME,
    INT,
    PACKAGE_NAME,
    POSITIVE_INT,
    REPOSITORY_NAME,
    SECTION,
    SWITCH,
    VARIABLE,
    pin_converter,
)
from opam_cli.cli.descriptors import CommandDescriptor, CommandRegistry, Invocation
from opam_cli.cli.help import CommandHelp, ProgramHelp, TopicList, resolve_topic
from opam_cli.cli.options import (
    BUILD_OPTIONS,
    GLOBAL_OPTIONS,
    INSTALLED_ONLY,
    PRINT_SHORT,
    REPOSITORY_KIND_OPTION,
    Flag,
    Opt,
    Positional,
)
from opam_cli.cli.subcommands import Arity, SubcommandRouter, SubVerb
from opam_cli.core import actions
from opam_cli.core.inference import guess_repository_kind, repository_address
from opam_cli.core.models import Address, Repository
from opam_cli.exceptions import DomainFailure, UsageError
from opam_cli.infra.filesystem import path_exists, real_path

BUILD_GROUPS = (GLOBAL_OPTIONS, BUILD_OPTIONS)

SUBCOMMAND = Positional(
    "subcommand",
    "COMMAND",
    "Name of the sub-command. See the COMMANDS section for more info.",
    nargs="?",
)
PARAMS = Positional("params", "PARAMS", "Optional parameters.", nargs="*")

PATTERNS = Positional("patterns", "PATTERNS", "List of package patterns.", nargs="*")
PACKAGES = Positional(
    "packages", "PACKAGES", "List of package names.", converter=PACKAGE_NAME, nargs="*"
)
REPOSITORIES = Positional(
    "repositories", "REPOSITORIES", "List of repository names.", converter=REPOSITORY_NAME, nargs="*"
)


def _resolve_address(address: Address) -> Address:
    return repository_address(address, exists=path_exists, real_path=real_path)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def _init(inv: Invocation) -> int:
    args, config = inv.args, inv.config
    given = list(args.repository)
    if len(given) > 2:
        raise UsageError("too many parameters for `init'", hint="Expected: init [NAME] [ADDRESS]")

    # Counted from the end: the last token is the address.
    address = ADDRESS.parse(given.pop()) if given else config.default_repository_address
    name = REPOSITORY_NAME.parse(given.pop()) if given else config.default_repository_name

    address = _resolve_address(address)
    kind = guess_repository_kind(
        args.kind, address, default=config.default_repository_kind, exists=path_exists
    )
    repository = Repository(name=name, kind=kind, address=address, priority=0)
    return inv.execute(actions.Init(repository, args.compiler, args.cores))


INIT = CommandDescriptor(
    name="init",
    doc="Initialize opam.",
    description=(
        "Create a fresh client state: initialise the configuration in ~/.opam "
        "and set up a default repository.",
        "More repositories can be added later with `opam repository add'.",
    ),
    handler=_init,
    options=(
        REPOSITORY_KIND_OPTION,
        Opt(
            ("c", "comp"),
            "compiler",
            "Which compiler version to use.",
            converter=COMPILER,
            default=lambda config: config.default_compiler,
            metavar="VERSION",
        ),
        Opt(
            ("j", "cores"),
            "cores",
            "Number of processes to use when building packages.",
            converter=POSITIVE_INT,
            default=lambda _config: 1,
            metavar="CORES",
        ),
    ),
    positionals=(
        Positional(
            "repository",
            "REPOSITORY",
            "Name and address of the initial repository: `[NAME] ADDRESS'.",
            nargs="*",
        ),
    ),
)


# ---------------------------------------------------------------------------
# list / search / info
# ---------------------------------------------------------------------------

def _list(inv: Invocation) -> int:
    args = inv.args
    return inv.execute(
        actions.ListPackages(
            patterns=tuple(args.patterns),
            print_short=args.print_short,
            installed_only=args.installed_only,
        )
    )


def _search(inv: Invocation) -> int:
    args = inv.args
    return inv.execute(
        actions.ListPackages(
            patterns=tuple(args.patterns),
            print_short=args.print_short,
            installed_only=args.installed_only,
            name_only=False,
            case_sensitive=args.case_sensitive,
        )
    )


def _info(inv: Invocation) -> int:
    return inv.execute(actions.Info(tuple(inv.args.patterns)))


LIST = CommandDescriptor(
    name="list",
    doc="Display the list of available packages.",
    description=(
        "Display the available packages, or only the installed ones with --installed.",
        "Unless --short is used, each line shows the package name, the installed "
        "version (or --) and a short description.",
    ),
    handler=_list,
    options=(PRINT_SHORT, INSTALLED_ONLY),
    positionals=(PATTERNS,),
)

SEARCH = CommandDescriptor(
    name="search",
    doc="Search into the package list.",
    description=(
        "Display the available packages whose name or description matches one of "
        "the given patterns, in the same format as `opam list'.",
    ),
    handler=_search,
    options=(
        PRINT_SHORT,
        INSTALLED_ONLY,
        Flag(("c", "case-sensitive"), "case_sensitive", "Force the search in case sensitive mode."),
    ),
    positionals=(PATTERNS,),
)

INFO = CommandDescriptor(
    name="info",
    doc="Display information about specific packages.",
    description=(
        "Show the information block of each selected package: name, installed "
        "version, installable versions and full description.",
    ),
    handler=_info,
    positionals=(PATTERNS,),
)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

class ConfigVerb(str, Enum):
    ENV = "env"
    VAR = "var"
    LIST = "list"
    SUBST = "subst"
    INCLUDES = "includes"
    BYTECOMP = "bytecomp"
    BYTELINK = "bytelink"
    ASMCOMP = "asmcomp"
    ASMLINK = "asmlink"


CONFIG_ROUTER: SubcommandRouter[ConfigVerb] = SubcommandRouter(
    "config",
    [
        SubVerb(ConfigVerb.ENV, ("env",), Arity.exactly(0), "",
                "Print the environment variables (PATH, MANPATH...) for the current switch."),
        SubVerb(ConfigVerb.VAR, ("var",), Arity.exactly(1), "VARIABLE",
                "Print the value associated with the given variable."),
        SubVerb(ConfigVerb.LIST, ("list",), Arity(), "[PACKAGE...]",
                "List the variables defined by the given packages (no package = all)."),
        SubVerb(ConfigVerb.SUBST, ("subst",), Arity(), "[FILE...]",
                "Substitute variables in the given files."),
        SubVerb(ConfigVerb.INCLUDES, ("includes",), Arity(), "[PACKAGE...]",
                "Print include options."),
        SubVerb(ConfigVerb.BYTECOMP, ("bytecomp",), Arity(), "[SECTION...]",
                "Print bytecode compile options."),
        SubVerb(ConfigVerb.BYTELINK, ("bytelink",), Arity(), "[SECTION...]",
                "Print bytecode linking options."),
        SubVerb(ConfigVerb.ASMCOMP, ("asmcomp",), Arity(), "[SECTION...]",
                "Print native compile options."),
        SubVerb(ConfigVerb.ASMLINK, ("asmlink",), Arity(), "[SECTION...]",
                "Print native linking options."),
    ],
)

# (is_link, is_byte) for each compile/link query.
_COMPILE_FLAGS: dict[ConfigVerb, tuple[bool, bool]] = {
    ConfigVerb.BYTECOMP: (True, False),
    ConfigVerb.BYTELINK: (True, True),
    ConfigVerb.ASMCOMP: (False, False),
    ConfigVerb.ASMLINK: (False, True),
}


def _config(inv: Invocation) -> int:
    args = inv.args
    route = inv.route()
    params = route.params
    tag = route.tag

    action: actions.Action
    if tag is ConfigVerb.ENV:
        action = actions.ConfigEnv(csh=args.csh)
    elif tag is ConfigVerb.VAR:
        action = actions.ConfigVariable(VARIABLE.parse(params[0]))
    elif tag is ConfigVerb.LIST:
        action = actions.ConfigList(PACKAGE_NAME.parse_all(params))
    elif tag is ConfigVerb.SUBST:
        action = actions.ConfigSubst(BASENAME.parse_all(params))
    elif tag is ConfigVerb.INCLUDES:
        action = actions.ConfigIncludes(args.recursive, PACKAGE_NAME.parse_all(params))
    else:
        is_link, is_byte = _COMPILE_FLAGS[tag]
        action = actions.ConfigCompile(
            recursive=args.recursive,
            is_link=is_link,
            is_byte=is_byte,
            sections=SECTION.parse_all(params),
        )
    return inv.execute(action)


CONFIG = CommandDescriptor(
    name="config",
    doc="Display configuration options for packages.",
    description=(
        "Use the opam state to print how to use installed libraries, update "
        "the user's PATH and substitute variables used in opam packages.",
        "Apart from `opam config env', these sub-commands are mostly used by "
        "opam itself.",
    ),
    handler=_config,
    options=(
        Flag(("r", "rec"), "recursive", "Recursive query."),
        Flag(("c", "csh"), "csh", "Use csh-compatible output mode."),
    ),
    positionals=(SUBCOMMAND, PARAMS),
    router=CONFIG_ROUTER,
)


# ---------------------------------------------------------------------------
# install / remove / reinstall / update / upgrade
# ---------------------------------------------------------------------------

def _install(inv: Invocation) -> int:
    return inv.execute(actions.Install(frozenset(inv.args.packages)))


def _remove(inv: Invocation) -> int:
    return inv.execute(actions.Remove(frozenset(inv.args.packages)))


def _reinstall(inv: Invocation) -> int:
    return inv.execute(actions.Reinstall(frozenset(inv.args.packages)))


def _update(inv: Invocation) -> int:
    return inv.execute(actions.Update(tuple(inv.args.repositories)))


def _upgrade(inv: Invocation) -> int:
    return inv.execute(actions.Upgrade(frozenset(inv.args.packages)))


INSTALL = CommandDescriptor(
    name="install",
    doc="Install a list of packages.",
    description=(
        "Install one or more packages, with their dependencies, in the currently "
        "selected switch. Use `opam switch' to install for another compiler.",
    ),
    handler=_install,
    positionals=(PACKAGES,),
    groups=BUILD_GROUPS,
)

REMOVE = CommandDescriptor(
    name="remove",
    doc="Remove a list of packages.",
    description=(
        "Remove (uninstall) one or more packages from the currently selected switch. "
        "This is the inverse of `opam install'.",
    ),
    handler=_remove,
    positionals=(PACKAGES,),
    groups=BUILD_GROUPS,
)

REINSTALL = CommandDescriptor(
    name="reinstall",
    doc="Reinstall a list of packages.",
    description=(
        "Remove the given packages, install them again and recompile the packages "
        "that depend on them.",
    ),
    handler=_reinstall,
    positionals=(PACKAGES,),
    groups=BUILD_GROUPS,
)

UPDATE = CommandDescriptor(
    name="update",
    doc="Update the list of available packages.",
    description=(
        "Synchronise the repositories set up by `opam init' or `opam repository', "
        "or only the named ones. Packages that can be upgraded are listed afterwards.",
    ),
    handler=_update,
    positionals=(REPOSITORIES,),
    groups=BUILD_GROUPS,
)

UPGRADE = CommandDescriptor(
    name="upgrade",
    doc="Upgrade the installed packages to their latest version.",
    description=(
        "Ask the dependency solver for a consistent state where most of the "
        "installed packages are at their latest available version.",
    ),
    handler=_upgrade,
    positionals=(PACKAGES,),
)


# ---------------------------------------------------------------------------
# upload
# ---------------------------------------------------------------------------

def _upload(inv: Invocation) -> int:
    args = inv.args
    if args.opam is None:
        raise DomainFailure("missing OPAM file", hint="Pass it with --opam FILE.")
    if args.descr is None:
        raise DomainFailure("missing description file", hint="Pass it with --descr FILE.")
    if args.archive is None:
        raise DomainFailure("missing archive file", hint="Pass it with --archive FILE.")
    return inv.execute(actions.Upload(args.opam, args.descr, args.archive, args.repository))


UPLOAD = CommandDescriptor(
    name="upload",
    doc="Upload a package to an opam repository.",
    description=(
        "Upload an already built package to a remote repository, if that "
        "repository is not read-only.",
    ),
    handler=_upload,
    options=(
        Opt(("opam",), "opam", "The .opam file, uploaded to repo://packages/NAME.VERSION/opam.",
            converter=FILENAME),
        Opt(("descr",), "descr", "The .descr file, uploaded to repo://packages/NAME.VERSION/descr.",
            converter=FILENAME),
        Opt(("archive",), "archive",
            "The archive, uploaded to repo://archives/NAME.VERSION+opam.tar.gz.",
            converter=FILENAME),
        Opt(("repo", "repository"), "repository",
            "The repository to upload to. Defaults to the default repository.",
            converter=REPOSITORY_NAME, metavar="REPO"),
    ),
)


# ---------------------------------------------------------------------------
# repository (alias: remote)
# ---------------------------------------------------------------------------

class RepositoryVerb(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    LIST = "list"
    PRIORITY = "priority"


REPOSITORY_ROUTER: SubcommandRouter[RepositoryVerb] = SubcommandRouter(
    "repository",
    [
        SubVerb(RepositoryVerb.ADD, ("add",), Arity.exactly(2), "NAME ADDRESS",
                "Add the repository NAME available at ADDRESS. Without --priority it "
                "ranks above every existing repository; without --kind its kind is "
                "guessed from ADDRESS."),
        SubVerb(RepositoryVerb.REMOVE, ("remove", "rm"), Arity.exactly(1), "NAME",
                "Remove the repository NAME."),
        SubVerb(RepositoryVerb.LIST, ("list",), Arity.exactly(0), "",
                "List all repositories used by opam."),
        SubVerb(RepositoryVerb.PRIORITY, ("priority",), Arity.exactly(2), "NAME PRIORITY",
                "Change the priority of the repository NAME (bigger is better)."),
    ],
)


def _repository(inv: Invocation) -> int:
    args, config = inv.args, inv.config
    route = inv.route()
    params = route.params
    tag = route.tag

    action: actions.Action
    if tag is RepositoryVerb.ADD:
        name = REPOSITORY_NAME.parse(params[0])
        address = _resolve_address(ADDRESS.parse(params[1]))
        kind = guess_repository_kind(
            args.kind, address, default=config.default_repository_kind, exists=path_exists
        )
        action = actions.RepositoryAdd(name, kind, address, args.priority)
    elif tag is RepositoryVerb.REMOVE:
        action = actions.RepositoryRemove(REPOSITORY_NAME.parse(params[0]))
    elif tag is RepositoryVerb.LIST:
        action = actions.RepositoryList()
    else:
        action = actions.RepositoryPriority(REPOSITORY_NAME.parse(params[0]), INT.parse(params[1]))
    return inv.execute(action)


REPOSITORY = CommandDescriptor(
    name="repository",
    aliases=("remote",),
    doc="Manage opam repositories.",
    description=(
        "Add, remove, list and rank package repositories. Use `opam update' to "
        "synchronise with their latest contents.",
    ),
    handler=_repository,
    options=(
        REPOSITORY_KIND_OPTION,
        Opt(("p", "priority"), "priority", "Set the repository priority (bigger is better).",
            converter=INT, metavar="INT"),
    ),
    positionals=(SUBCOMMAND, PARAMS),
    router=REPOSITORY_ROUTER,
)


# ---------------------------------------------------------------------------
# switch
# ---------------------------------------------------------------------------

class SwitchVerb(str, Enum):
    INSTALL = "install"
    REMOVE = "remove"
    EXPORT = "export"
    IMPORT = "import"
    REINSTALL = "reinstall"
    LIST = "list"
    CURRENT = "current"
    SWITCH = "switch"


SWITCH_ROUTER: SubcommandRouter[SwitchVerb] = SubcommandRouter(
    "switch",
    [
        SubVerb(SwitchVerb.INSTALL, ("add", "install"), Arity.exactly(1), "SWITCH",
                "Install the given compiler switch."),
        SubVerb(SwitchVerb.REMOVE, ("rm", "remove"), Arity(), "[SWITCH...]",
                "Remove the given compiler switches."),
        SubVerb(SwitchVerb.EXPORT, ("export",), Arity.exactly(1), "FILE",
                "Export the packages installed in the current switch to FILE."),
        SubVerb(SwitchVerb.IMPORT, ("import",), Arity.exactly(1), "FILE",
                "Install the packages listed in FILE into the current switch."),
        SubVerb(SwitchVerb.REINSTALL, ("reinstall",), Arity.exactly(1), "SWITCH",
                "Reinstall the given compiler switch."),
        SubVerb(SwitchVerb.LIST, ("list",), Arity.exactly(0), "",
                "List the available compilers."),
        SubVerb(SwitchVerb.CURRENT, ("current",), Arity.exactly(0), "",
                "Show the current compiler switch."),
    ],
    fallback=SubVerb(SwitchVerb.SWITCH, (), Arity.exactly(1), "SWITCH",
                     "Switch to SWITCH; with --alias-of, install it first as an alias."),
)

_ALIAS_OF_VERBS = frozenset({SwitchVerb.INSTALL, SwitchVerb.SWITCH})


def _switch(inv: Invocation) -> int:
    args, config = inv.args, inv.config
    route = inv.route()
    params = route.params
    tag = route.tag

    if args.alias_of is not None and tag not in _ALIAS_OF_VERBS:
        raise UsageError(
            "invalid --alias-of option",
            hint="--alias-of is only valid when installing or switching to a compiler.",
        )

    action: actions.Action
    if tag in _ALIAS_OF_VERBS:
        switch = SWITCH.parse(params[0])
        if tag is SwitchVerb.SWITCH and args.alias_of is None:
            action = actions.SwitchTo(config.quiet, switch)
        else:
            compiler = args.alias_of or COMPILER.parse(params[0])
            action = actions.SwitchInstall(config.quiet, switch, compiler, args.no_base_packages)
    elif tag is SwitchVerb.REMOVE:
        action = actions.SwitchRemove(SWITCH.parse_all(params))
    elif tag is SwitchVerb.EXPORT:
        action = actions.SwitchExport(FILENAME.parse(params[0]))
    elif tag is SwitchVerb.IMPORT:
        action = actions.SwitchImport(FILENAME.parse(params[0]))
    elif tag is SwitchVerb.REINSTALL:
        action = actions.SwitchReinstall(SWITCH.parse(params[0]))
    elif tag is SwitchVerb.LIST:
        action = actions.SwitchList()
    else:
        action = actions.SwitchCurrent()
    return inv.execute(action)


SWITCH_COMMAND = CommandDescriptor(
    name="switch",
    doc="Manage multiple installation of compilers.",
    description=(
        "Switch between compiler versions, installing a compiler the first time it "
        "is switched to. Each switch keeps its own independent state, such as its "
        "list of installed packages.",
    ),
    handler=_switch,
    options=(
        Opt(("a", "alias-of"), "alias_of",
            "The name of the compiler description which will be aliased.",
            converter=COMPILER, metavar="COMP"),
        Flag(("no-base-packages",), "no_base_packages",
             "Do not install base packages (useful when testing)."),
    ),
    positionals=(SUBCOMMAND, PARAMS),
    router=SWITCH_ROUTER,
)


# ---------------------------------------------------------------------------
# pin
# ---------------------------------------------------------------------------

def _pin(inv: Invocation) -> int:
    args = inv.args
    if args.list_pins or (args.package is None and args.target is None):
        return inv.execute(actions.PinList())
    if args.package is None or args.target is None:
        raise UsageError("wrong arguments for `pin'", hint="Expected: pin PACKAGE PIN")
    target = pin_converter(args.kind).parse(args.target)
    return inv.execute(actions.Pin(args.package, target))


PIN = CommandDescriptor(
    name="pin",
    doc="Pin a given package to a specific version.",
    description=(
        "Pin a package to a specific version, or use a local path or git url as "
        "its source for installing and upgrading. `opam pin PACKAGE none' undoes it.",
        "Without arguments, or with --list, list the currently pinned packages.",
    ),
    handler=_pin,
    options=(
        REPOSITORY_KIND_OPTION,
        Flag(("l", "list"), "list_pins", "List the currently pinned packages."),
    ),
    positionals=(
        Positional("package", "PACKAGE", "Package name.", converter=PACKAGE_NAME, nargs="?"),
        Positional(
            "target",
            "PIN",
            "Specific version, local path or git url to pin the package to, "
            "or 'none' to unpin the package.",
            nargs="?",
        ),
    ),
)


# ---------------------------------------------------------------------------
# help
# ---------------------------------------------------------------------------

def _help(inv: Invocation) -> int:
    registry = inv.registry
    request = resolve_topic(inv.args.topic, registry.names)
    if isinstance(request, ProgramHelp):
        registry.build_program_parser(inv.config).print_help()
    elif isinstance(request, TopicList):
        for name in request.names:
            output.print(name, markup=False)
    elif isinstance(request, CommandHelp):
        descriptor = registry.lookup(request.name)
        descriptor.build_parser(inv.config, invoked_as=request.name).print_help()
    return exit_codes.SUCCESS


HELP = CommandDescriptor(
    name="help",
    doc="Display help about opam and opam commands.",
    description=("Print help about opam commands.",),
    handler=_help,
    positionals=(
        Positional(
            "topic",
            "TOPIC",
            "The topic to get help on. `topics' lists the topics.",
            nargs="?",
        ),
    ),
)


REGISTRY = CommandRegistry(
    [
        INIT,
        LIST,
        SEARCH,
        INFO,
        INSTALL,
        REMOVE,
        REINSTALL,
        UPDATE,
        UPGRADE,
        CONFIG,
        REPOSITORY,
        SWITCH_COMMAND,
        PIN,
        UPLOAD,
        HELP,
    ]
)
