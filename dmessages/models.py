from django.db import models


def build_conversation_id(user_a, user_b):
    """Order-independent key for the pair: both ids sorted, joined with ``_``."""
    return "_".join(sorted([str(user_a), str(user_b)]))


class Message(models.Model):
    conversation_id = models.CharField(max_length=201, db_index=True, editable=False)
    sender_id = models.CharField(max_length=100, db_index=True)
    receiver_id = models.CharField(max_length=100, db_index=True)
    listing_id = models.CharField(max_length=100, null=True, blank=True)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['created_at', 'id']

    def save(self, *args, **kwargs):
        # The key is fixed at creation
        if not self.conversation_id:
            self.conversation_id = build_conversation_id(self.sender_id, self.receiver_id)
        super().save(*args, **kwargs)

    def counterpart_of(self, user_id):
        """The participant that is not ``user_id``."""
        return self.receiver_id if self.sender_id == str(user_id) else self.sender_id

    def __str__(self):
        return f"{self.sender_id} to {self.receiver_id}: {self.message[:50]}"
