# matching/management/commands/seed_profiles.py

from django.core.management.base import BaseCommand
from django.contrib.auth.models import User

from matching.ledger import ledger
from matching.models import Profile

DEMO_PROFILES = [
    {
        'username': 'alex@example.com',
        'display_name': 'Alex',
        'age': 28,
        'location': 'San Francisco, CA',
        'location_lat': 37.7749,
        'location_lng': -122.4194,
        'gender_identity': 'non-binary',
        'sexual_orientation': 'queer',
        'pronouns': 'they/them',
        'bio': 'Coffee enthusiast, hiking lover, and amateur photographer.',
        'tags': ['Hiking', 'Photography', 'Coffee'],
    },
    {
        'username': 'jordan@example.com',
        'display_name': 'Jordan',
        'age': 31,
        'location': 'Oakland, CA',
        'location_lat': 37.8044,
        'location_lng': -122.2712,
        'gender_identity': 'transgender woman',
        'sexual_orientation': 'lesbian',
        'pronouns': 'she/her',
        'bio': 'Bookworm and board game night host.',
        'tags': ['Books', 'Board Games'],
        'age_visible': False,
    },
    {
        'username': 'sam@example.com',
        'display_name': 'Sam',
        'age': 26,
        'location': 'Berkeley, CA',
        'location_lat': 37.8715,
        'location_lng': -122.2730,
        'gender_identity': 'genderqueer',
        'sexual_orientation': 'pansexual',
        'pronouns': 'they/them',
        'bio': 'Climbing gyms, synth pop and late-night ramen.',
        'tags': ['Climbing', 'Music'],
    },
    {
        'username': 'riley@example.com',
        'display_name': 'Riley',
        'age': 35,
        'location': 'San Jose, CA',
        'location_lat': 37.3382,
        'location_lng': -121.8863,
        'gender_identity': 'cisgender man',
        'sexual_orientation': 'gay',
        'pronouns': 'he/him',
        'bio': 'Weekend baker, weekday engineer.',
        'tags': ['Baking', 'Cycling'],
        'location_visible': False,
    },
]


class Command(BaseCommand):
    help = 'Create demo users and profiles, plus one mutual match to try the chat with.'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='pulse-demo-pass', help='Password for every demo user.')

    def handle(self, *args, **options):
        users = []
        for item in DEMO_PROFILES:
            item = dict(item)
            username = item.pop('username')
            user, created = User.objects.get_or_create(username=username, defaults={'email': username})
            if created:
                user.set_password(options['password'])
                user.save()
            Profile.objects.update_or_create(user=user, defaults=item)
            users.append(user)

        first, second = users[0], users[2]
        ledger.record_interest(first.id, second.id)
        result = ledger.record_interest(second.id, first.id)

        self.stdout.write(self.style.SUCCESS(f'Seeded {len(users)} profiles.'))
        if result.match is not None:
            self.stdout.write(self.style.SUCCESS(
                f'{first.username} and {second.username} are matched (match {result.match.pk}).'
            ))
