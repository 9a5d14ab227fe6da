"""Demo fixtures loaded into a fresh store at startup.

Activity start times and message timestamps are relative to the moment of
seeding, so the demo always has upcoming plans and a recent chat.
"""

import logging
from datetime import UTC, datetime, timedelta

from unalon.models import Activity, Message, User

logger = logging.getLogger(__name__)

AVATAR = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=400"
COVER = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"

DEMO_USERS = [
    ("user1", "ethan_sf", "Ethan", 24, "1472099645785-5658abf4ff4e", 85,
     ["Hiking", "Photography", "Reading", "Cooking", "Travel"],
     "The only way to do great work is to love what you do."),
    ("user2", "sarah_games", "Sarah", 28, "1438761681033-6461ffad8d80", 92,
     ["Board Games", "Social", "Fun"],
     "Life is more fun when you share it with others."),
    ("user3", "marcus_coffee", "Marcus", 26, "1500648767791-00dcc994a43e", 78,
     ["Coffee", "Conversations", "Philosophy"],
     "Good coffee and good conversation make everything better."),
    ("user4", "alex_hiker", "Alex", 30, "1472099645785-5658abf4ff4e", 95,
     ["Hiking", "Outdoors", "Adventure"],
     "The mountains are calling and I must go."),
    ("user5", "maya_photo", "Maya", 25, "1539571696357-5a69c17a67c6", 88,
     ["Photography", "Art", "Urban Exploration"],
     "Every picture tells a story."),
    ("user6", "emma_bookworm", "Emma", 27, "1494790108755-2616b612b786", 89,
     ["Reading", "Books", "Writing"],
     "Books are a uniquely portable magic."),
    ("user7", "david_musician", "David", 31, "1507003211169-0a1dd7228f2d", 91,
     ["Music", "Guitar", "Jazz"],
     "Music is the universal language."),
    ("user8", "lisa_yoga", "Lisa", 29, "1544005313-94ddf0286df2", 93,
     ["Yoga", "Meditation", "Wellness"],
     "Peace comes from within."),
    ("user9", "james_cook", "James", 33, "1506794778202-cad84cf45f1d", 87,
     ["Cooking", "Food", "Culinary Arts"],
     "Good food is the foundation of genuine happiness."),
    ("user10", "nina_artist", "Nina", 26, "1531123897727-8f129e1688ce", 90,
     ["Art", "Painting", "Creative Expression"],
     "Art is the lie that enables us to realize the truth."),
]


def demo_activities(now: datetime) -> list[Activity]:
    rows = [
        ("activity1", "Board Game Night",
         "Weekly social gathering for strategy games and fun!",
         "user2", "Community Center", timedelta(hours=3), "3 hours", 8,
         ["Social", "Fun"], ["user1", "user3", "user4", "user6", "user7"],
         "1611371805429-8b5c1b2c34ba"),
        ("activity2", "Coffee & Conversation",
         "Deep conversations over great coffee - perfect Sunday morning!",
         "user3", "Blue Bottle Coffee", timedelta(days=1), "1.5 hours", 6,
         ["Chill", "Talkative"], ["user5", "user8", "user9"],
         "1554118811-1e0d58224f24"),
        ("activity3", "Weekend Hiking Adventure",
         "Explore beautiful trails with amazing city views!",
         "user4", "Twin Peaks Trailhead", timedelta(days=5), "4 hours", 12,
         ["Adventurous", "Outdoors"],
         ["user1", "user2", "user3", "user5", "user6", "user8", "user10"],
         "1551632811-561732d1e306"),
        ("activity4", "Urban Photography Walk",
         "Capture the city's hidden gems and street art!",
         "user5", "Mission District", timedelta(days=6), "2.5 hours", 10,
         ["Creative", "Urban"], ["user2", "user4", "user7", "user10"],
         "1449824913935-59a10b8d2000"),
    ]
    return [
        Activity(
            id=activity_id,
            title=title,
            description=description,
            host_id=host_id,
            location=location,
            datetime=now + offset,
            duration=duration,
            max_participants=max_participants,
            current_participants=len(participant_ids),
            vibes=vibes,
            participant_ids=participant_ids,
            image=COVER.format(photo),
        )
        for (activity_id, title, description, host_id, location, offset, duration,
             max_participants, vibes, participant_ids, photo) in rows
    ]


def demo_messages(now: datetime) -> list[Message]:
    rows = [
        ("msg1", "user2", "user1", "Hi! Thanks for joining the board game night!",
         timedelta(minutes=5), True),
        ("msg2", "user1", "user2", "Excited to be there! What games are we playing?",
         timedelta(minutes=3), True),
        ("msg3", "user2", "user1", "Great! See you tonight for board games",
         timedelta(seconds=30), False),
        ("msg4", "user3", "user1", "Looking forward to our coffee chat tomorrow!",
         timedelta(minutes=45), True),
    ]
    return [
        Message(
            id=message_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=now - ago,
            is_read=is_read,
        )
        for message_id, sender_id, receiver_id, content, ago, is_read in rows
    ]


def seed_demo_data(store) -> None:
    """Insert the demo users, activities and messages."""
    now = datetime.now(UTC)

    for user_id, username, name, age, photo, score, interests, quote in DEMO_USERS:
        store.insert(User, User(
            id=user_id,
            username=username,
            email=f"{name.lower()}@example.com",
            name=name,
            age=age,
            location="San Francisco",
            avatar=AVATAR.format(photo),
            unalon_score=score,
            interests=interests,
            favorite_quote=quote,
        ))

    activities = demo_activities(now)
    for activity in activities:
        store.insert(Activity, activity)

    messages = demo_messages(now)
    for message in messages:
        store.insert(Message, message)

    logger.info(
        f"Seeded {len(DEMO_USERS)} users, {len(activities)} activities, "
        f"{len(messages)} messages"
    )
