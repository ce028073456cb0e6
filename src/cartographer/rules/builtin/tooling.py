"""Build, lint and editor tool configuration."""

from cartographer.rules.models import DescriptionRule

ALL_TOOLING_RULES = [
    DescriptionRule("tsconfig.json", "TypeScript compiler configuration"),
    DescriptionRule("tsconfig*.json", "TypeScript compiler configuration"),
    DescriptionRule("jest.config.*", "Jest test configuration"),
    DescriptionRule("vitest.config.*", "Vitest test configuration"),
    DescriptionRule("vite.config.*", "Vite build configuration"),
    DescriptionRule("webpack.config.*", "Webpack build configuration"),
    DescriptionRule("rollup.config.*", "Rollup build configuration"),
    DescriptionRule("babel.config.*", "Babel transpiler configuration"),
    DescriptionRule(".babelrc", "Babel transpiler configuration"),
    DescriptionRule(".eslintrc*", "ESLint linter configuration"),
    DescriptionRule(".prettierrc*", "Prettier formatter configuration"),
    DescriptionRule(".editorconfig", "Editor settings (indentation, encoding)"),
    DescriptionRule(".npmignore", "npm publish ignore rules"),
    DescriptionRule(".npmrc", "npm registry configuration"),
    DescriptionRule(".nvmrc", "Node.js version specification"),
    DescriptionRule(".node-version", "Node.js version specification"),
]
