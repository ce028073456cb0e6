"""Repository housekeeping, docs and deployment files."""

from cartographer.rules.models import DescriptionRule

ALL_PROJECT_RULES = [
    DescriptionRule(".gitignore", "Git ignore rules"),
    DescriptionRule(".gitattributes", "Git attributes configuration"),
    DescriptionRule(".env.example", "Environment variable template"),
    DescriptionRule("LICENSE", "Project license"),
    DescriptionRule("CHANGELOG*", "Version changelog"),
    DescriptionRule("CONTRIBUTING*", "Contribution guidelines"),
    DescriptionRule("CODE_OF_CONDUCT*", "Code of conduct"),
    DescriptionRule("Dockerfile", "Docker container definition"),
    DescriptionRule("docker-compose*", "Docker multi-container orchestration"),
    DescriptionRule(".dockerignore", "Docker build ignore rules"),
    DescriptionRule("Makefile", "Build automation rules"),
    DescriptionRule("Procfile", "Process manager configuration"),
]
