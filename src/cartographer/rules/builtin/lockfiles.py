"""Dependency lockfiles and generated artifacts."""

from cartographer.rules.models import DescriptionRule

ALL_LOCKFILE_RULES = [
    DescriptionRule("package-lock.json", "npm dependency lockfile"),
    DescriptionRule("yarn.lock", "Yarn dependency lockfile"),
    DescriptionRule("pnpm-lock.yaml", "pnpm dependency lockfile"),
    DescriptionRule("bun.lockb", "Bun dependency lockfile"),
    DescriptionRule("*.min.js", "Minified JavaScript bundle"),
    DescriptionRule("*.min.css", "Minified CSS bundle"),
    DescriptionRule("*.d.ts", "TypeScript type declarations"),
    DescriptionRule("*.map", "Source map file"),
    DescriptionRule("*.snap", "Test snapshot file"),
]
