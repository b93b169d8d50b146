from clinicops.domains.scheduling.infrastructure.external.videosdk.client import VideoSDKMeetingProvider

__all__ = ["VideoSDKMeetingProvider"]
