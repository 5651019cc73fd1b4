"""Management command to print the role permission matrix."""

import json

from django.core.management.base import BaseCommand, CommandError

from apps.core.contracts.policy import Action, Role
from apps.core.services.policy_table import ROLE_GRANTS


class Command(BaseCommand):
    """Print which resource types each role may view, create, edit, approve and delete."""

    help = 'Print the role by action permission matrix and data scope for each role'

    def add_arguments(self, parser):
        parser.add_argument(
            '--format',
            type=str,
            default='text',
            choices=['text', 'json'],
            help='Output format'
        )
        parser.add_argument(
            '--role',
            type=str,
            default=None,
            help='Limit output to one role (display label or enum name)'
        )

    def handle(self, *args, **options):
        roles = list(Role)
        if options['role']:
            role = Role.parse(options['role'])
            if role is None:
                raise CommandError(f"Unknown role: {options['role']}")
            roles = [role]

        matrix = {role.value: ROLE_GRANTS[role].to_dict() for role in roles}

        if options['format'] == 'json':
            self.stdout.write(json.dumps(matrix, indent=2))
        else:
            self._print_matrix(roles)

    def _print_matrix(self, roles):
        for role in roles:
            grant = ROLE_GRANTS[role]
            self.stdout.write(self.style.SUCCESS(f'\n{role.value.upper()}'))
            self.stdout.write('=' * 50)
            self.stdout.write(f'dataScope: {grant.data_scope.value}')
            for action in Action:
                resources = sorted(grant.resources_for(action))
                self.stdout.write(f"{action.grant_key}: {', '.join(resources) if resources else '-'}")
            if grant.kpis:
                self.stdout.write(f"kpis: {', '.join(grant.kpis)}")
