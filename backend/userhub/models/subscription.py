# userhub/models/subscription.py
import uuid
from tortoise import fields, models

class Subscription(models.Model):
    """
    A user (subscriber) following another user's channel.
    - subscriber: the user who subscribes
    - channel: the user being subscribed to
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    subscriber: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="subscriptions", on_delete=fields.CASCADE
    )
    channel: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="subscribers", on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "subscriptions"
        unique_together = (("subscriber", "channel"),)
