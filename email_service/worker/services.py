"""Job processing pipeline for the email worker.

One job moves through template resolution, variable validation, profile
resolution, rendering, dispatch and result tracking, strictly in that order.
Every stage hands back either the input for the next stage or a ``Failure``;
the first ``Failure`` ends the job. Whatever happens, exactly one tracking
record is written and exactly one outcome is returned.
"""

import logging
from dataclasses import dataclass
from typing import Union

from django.conf import settings

from .api_client import ServiceAPIClient
from .cache import PROFILE_CACHE_PREFIX, TEMPLATE_CACHE_PREFIX, CacheAsideResolver, RedisCacheStore
from .exceptions import CacheError, DispatchError, RenderError, ResolutionError
from .models import EmailTemplate, Failure, Job, Success, UserProfile
from .rendering import TemplateRenderer, html_to_text
from .tracking import ResultTracker
from .transport import SmtpTransport
from .validation import validate_required_variables

logger = logging.getLogger(__name__)

Outcome = Union[Success, Failure]


@dataclass(frozen=True)
class RenderedEmail:
    to: str
    subject: str
    html: str
    text: str


class JobProcessor:
    def __init__(self, template_resolver, profile_resolver, renderer, transport, tracker,
                 from_email: str = None):
        self.template_resolver = template_resolver
        self.profile_resolver = profile_resolver
        self.renderer = renderer
        self.transport = transport
        self.tracker = tracker
        self.from_email = from_email

    def process(self, job: Job) -> Outcome:
        try:
            outcome = self._run(job)
        except Exception as e:
            logger.exception(f"Unexpected error in email job: {job.request_id}")
            outcome = Failure(str(e) or e.__class__.__name__)

        if isinstance(outcome, Failure):
            logger.error(f"Email job failed: {job.request_id} - {outcome.error}")
            self.tracker.record_failure(job, outcome.error)
        return outcome

    def _run(self, job: Job) -> Outcome:
        template = self.resolve_template(job)
        if isinstance(template, Failure):
            return template

        validated = self.validate(job, template)
        if isinstance(validated, Failure):
            return validated

        profile = self.resolve_profile(job)
        if isinstance(profile, Failure):
            return profile

        email = self.render(job, template, profile)
        if isinstance(email, Failure):
            return email

        message_id = self.dispatch(email)
        if isinstance(message_id, Failure):
            return message_id

        logger.info(f"Email sent successfully: {message_id}")
        self.tracker.record_success(job, message_id, profile.email)
        return Success(message_id)

    def resolve_template(self, job: Job) -> Union[EmailTemplate, Failure]:
        try:
            return self.template_resolver.resolve(job.notification_type)
        except (ResolutionError, CacheError) as e:
            logger.error(f"Failed to fetch template: {job.notification_type} ({e})")
            return Failure(f"Template not found: {job.notification_type}")

    def validate(self, job: Job, template: EmailTemplate) -> Union[EmailTemplate, Failure]:
        result = validate_required_variables(template.required_variables, job.message_data)
        if not result.valid:
            return Failure(f"Missing required variables: {', '.join(result.missing)}")
        return template

    def resolve_profile(self, job: Job) -> Union[UserProfile, Failure]:
        try:
            profile = self.profile_resolver.resolve(job.user_id)
        except (ResolutionError, CacheError) as e:
            logger.error(f"Failed to fetch user profile: {job.user_id} ({e})")
            return Failure(f"User not found: {job.user_id}")

        if not profile.email:
            return Failure(f"User {job.user_id} has no email address")
        return profile

    def render(self, job: Job, template: EmailTemplate, profile: UserProfile) -> Union[RenderedEmail, Failure]:
        try:
            subject = self.renderer.render(template.subject_template, job.message_data)
            html = self.renderer.render(template.body_template, job.message_data)
        except RenderError as e:
            return Failure(str(e))
        return RenderedEmail(to=profile.email, subject=subject, html=html, text=html_to_text(html))

    def dispatch(self, email: RenderedEmail) -> Union[str, Failure]:
        try:
            return self.transport.send(
                to=email.to,
                subject=email.subject,
                html=email.html,
                text=email.text,
                from_email=self.from_email,
            )
        except DispatchError as e:
            return Failure(str(e))


def build_job_processor(cache=None, api_client=None, transport=None) -> JobProcessor:
    # Wires the production collaborators from Django settings
    cache = cache or RedisCacheStore()
    api_client = api_client or ServiceAPIClient()
    transport = transport or SmtpTransport()

    template_resolver = CacheAsideResolver(
        cache,
        prefix=TEMPLATE_CACHE_PREFIX,
        ttl=settings.TEMPLATE_CACHE_TTL,
        fetch=api_client.get_email_template,
        decode=EmailTemplate.from_dict,
        encode=EmailTemplate.to_dict,
        kind="template",
    )
    profile_resolver = CacheAsideResolver(
        cache,
        prefix=PROFILE_CACHE_PREFIX,
        ttl=settings.PROFILE_CACHE_TTL,
        fetch=api_client.get_user_profile,
        decode=UserProfile.from_dict,
        encode=UserProfile.to_dict,
        kind="user",
    )
    return JobProcessor(
        template_resolver=template_resolver,
        profile_resolver=profile_resolver,
        renderer=TemplateRenderer(),
        transport=transport,
        tracker=ResultTracker(cache),
        from_email=settings.DEFAULT_FROM_EMAIL,
    )
